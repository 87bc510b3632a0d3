"""
CLI tests.

Help output, listing and deleting stored rows, and the error exit code.
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path

import pytest
from kitchen_sink_model import KIND_NAME, make_kitchen_sink

from binding_engine.store.sqlite_store import SqliteEntityStorage, read_stored_entities
from entity_binder.cli import main


def _seed(tmp_path: Path, *names: str) -> Path:
    db = tmp_path / "entities.sqlite"
    storage = SqliteEntityStorage(db_path=db, factory=make_kitchen_sink)
    for name in names:
        asyncio.run(storage.create(make_kitchen_sink(name)))
    return db


def _run_help(argv: list[str]) -> None:
    """Run the CLI expecting argparse to exit cleanly with code 0 for --help."""
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 0


def test_cli_root_help(capsys: pytest.CaptureFixture[str]) -> None:
    _run_help(["--help"])
    out = capsys.readouterr().out.lower()
    assert "usage:" in out
    assert "entity-binder" in out


@pytest.mark.parametrize("subcommand", ["list", "delete", "gui"])
def test_cli_subcommand_help(subcommand: str, capsys: pytest.CaptureFixture[str]) -> None:
    _run_help([subcommand, "--help"])
    out = capsys.readouterr().out.lower()
    assert "usage:" in out
    assert subcommand in out


def test_cli_list(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = _seed(tmp_path, "West", "East")

    rc = main(["list", "--db", str(db), "--kind", KIND_NAME])

    lines = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert lines == ['["East"]\tEast', '["West"]\tWest']


def test_cli_delete(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = _seed(tmp_path, "Main")

    rc = main(["delete", "--db", str(db), "--kind", KIND_NAME, "--identity", '["Main"]'])

    assert rc == 0
    assert "Deleted" in capsys.readouterr().out
    assert read_stored_entities(db, KIND_NAME) == []


def test_cli_delete_unknown_returns_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = _seed(tmp_path)

    rc = main(["delete", "--db", str(db), "--kind", KIND_NAME, "--identity", '["Ghost"]'])

    assert rc == 2
    assert "ERROR:" in capsys.readouterr().out


def test_cli_list_bad_payload_returns_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = _seed(tmp_path)
    with sqlite3.connect(db) as conn:
        conn.execute(
            "INSERT INTO entities(kind, identity, payload) VALUES(?, ?, ?)",
            (KIND_NAME, '["x"]', "[1, 2]"),
        )

    rc = main(["list", "--db", str(db), "--kind", KIND_NAME])

    assert rc == 2
    assert "ERROR:" in capsys.readouterr().out

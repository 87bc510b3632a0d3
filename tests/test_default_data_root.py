from __future__ import annotations

from pathlib import Path

import pytest

from binding_engine.paths import default_data_root, default_database_path


def test_default_data_root_prefers_local_appdata(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))

    assert default_data_root() == tmp_path / "Local" / "EntityBinder"


def test_default_data_root_falls_back_to_roaming(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))

    assert default_data_root() == tmp_path / "Roaming" / "EntityBinder"


def test_default_data_root_falls_back_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    assert default_data_root() == tmp_path / ".local" / "share" / "EntityBinder"


def test_default_database_path(tmp_path: Path) -> None:
    assert default_database_path(tmp_path) == tmp_path / "entities.sqlite"

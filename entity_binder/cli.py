"""
Command-line interface for stored entities.

Notes
-----
The CLI is intentionally thin. It parses arguments and delegates to the storage
module; the ``gui`` command imports the Qt application lazily.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Mapping

from binding_engine.paths import default_database_path
from binding_engine.store.errors import EntityStoreError
from binding_engine.store.sqlite_store import delete_stored_entity, read_stored_entities


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="entity-binder",
        description="Inspect and edit stored entity records",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    list_p = sub.add_parser("list", help="List stored identities of one entity kind")
    list_p.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path. If omitted, the default data root is used.",
    )
    list_p.add_argument("--kind", required=True, help="Entity type name")

    delete_p = sub.add_parser("delete", help="Delete one stored entity")
    delete_p.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path. If omitted, the default data root is used.",
    )
    delete_p.add_argument("--kind", required=True, help="Entity type name")
    delete_p.add_argument(
        "--identity",
        required=True,
        help='Stored identity, as printed by "list" (a JSON array).',
    )

    gui_p = sub.add_parser("gui", help="Launch the demo editor")
    gui_p.add_argument(
        "--data-root",
        type=Path,
        default=None,
        help="Override the data root (primarily for testing). If omitted, defaults are used.",
    )
    return parser


def _first_value(payload: Mapping[str, object]) -> object:
    return next(iter(payload.values()), "")


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "list":
        db_path = args.db if args.db is not None else default_database_path()
        try:
            stored = read_stored_entities(db_path, args.kind)
        except EntityStoreError as exc:
            print(f"ERROR: {exc}")
            return 2
        for entity in stored:
            print(f"{entity.identity}\t{_first_value(entity.payload)}")
        return 0

    if args.command == "delete":
        db_path = args.db if args.db is not None else default_database_path()
        try:
            delete_stored_entity(db_path, args.kind, args.identity)
        except EntityStoreError as exc:
            print(f"ERROR: {exc}")
            return 2
        print(f"Deleted {args.kind} {args.identity}")
        return 0

    if args.command == "gui":
        from gui.app import main as gui_main

        return gui_main(args.data_root)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Module entrypoint for the entity-binder CLI.

This file exists so that `python -m entity_binder ...` works when the
console-script wrapper is not installed.
"""

from __future__ import annotations

from entity_binder.cli import main


def _run() -> None:
    """
    Execute the command line interface.

    Raises
    ------
    SystemExit
        Carries the CLI exit code.
    """
    raise SystemExit(main())


if __name__ == "__main__":
    _run()

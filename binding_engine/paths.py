"""
Filesystem locations used by the entity binder.

The binding engine itself touches no files; these helpers are used by the
storage, settings and CLI layers to agree on defaults.
"""

from __future__ import annotations

import os
from pathlib import Path

APP_DIR_NAME = "EntityBinder"
DATABASE_FILE_NAME = "entities.sqlite"


def default_data_root() -> Path:
    """
    Resolve the default data root.

    Preference order:
    1) %LOCALAPPDATA% if set
    2) %APPDATA% (Roaming) as fallback
    3) ~/.local/share on other platforms
    """
    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / APP_DIR_NAME

    roaming = os.environ.get("APPDATA")
    if roaming:
        return Path(roaming) / APP_DIR_NAME

    return Path.home() / ".local" / "share" / APP_DIR_NAME


def default_database_path(data_root: Path | None = None) -> Path:
    """Return the entity database path under ``data_root`` (or the default root)."""
    root = default_data_root() if data_root is None else data_root
    return root / DATABASE_FILE_NAME

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from binding_engine.duration import DEFAULT_DURATION_UNITS, UNITS, DurationUnit
from binding_engine.paths import default_data_root

SETTINGS_FILE_NAME = "editor_settings.json"


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """
    Persisted editor settings.

    Notes
    -----
    The discard prompt texts are shown when an editor with unsaved changes is
    closed. ``duration_units`` is the default unit mask for duration fields that
    do not choose their own.
    """

    discard_title: str
    discard_body: str
    discard_positive: str
    discard_negative: str
    duration_units: DurationUnit

    @staticmethod
    def defaults() -> "EditorSettings":
        return EditorSettings(
            discard_title="Discard changes?",
            discard_body="This entity has unsaved changes. Close the editor anyway?",
            discard_positive="Discard",
            discard_negative="Keep editing",
            duration_units=DEFAULT_DURATION_UNITS,
        )


def _settings_path(data_root: Path | None) -> Path:
    root = default_data_root() if data_root is None else data_root
    return root / SETTINGS_FILE_NAME


def _units_from_names(names: object) -> DurationUnit | None:
    if not isinstance(names, list):
        return None
    mask = DurationUnit(0)
    for name in names:
        if isinstance(name, str) and name in DurationUnit.__members__:
            mask |= DurationUnit[name]
    return mask or None


def _units_to_names(units: DurationUnit) -> list[str]:
    return [u.name for u in UNITS if u in units]


def load_editor_settings(*, data_root: Path | None) -> EditorSettings:
    """
    Load editor settings from disk.

    Parameters
    ----------
    data_root:
        Data root. If None, the default is used.

    Returns
    -------
    EditorSettings
        Loaded settings, or defaults if missing/unreadable. Unknown unit names
        are dropped; a list with no known unit falls back to the default mask.
    """
    defaults = EditorSettings.defaults()
    path = _settings_path(data_root)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return defaults
    if not isinstance(payload, dict):
        return defaults

    def _text(key: str, fallback: str) -> str:
        v = payload.get(key)
        return v if isinstance(v, str) and v.strip() else fallback

    return EditorSettings(
        discard_title=_text("discard_title", defaults.discard_title),
        discard_body=_text("discard_body", defaults.discard_body),
        discard_positive=_text("discard_positive", defaults.discard_positive),
        discard_negative=_text("discard_negative", defaults.discard_negative),
        duration_units=_units_from_names(payload.get("duration_units")) or defaults.duration_units,
    )


def save_editor_settings(*, data_root: Path | None, settings: EditorSettings) -> None:
    """Save editor settings to disk, creating the data root as needed."""
    path = _settings_path(data_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "discard_title": settings.discard_title,
        "discard_body": settings.discard_body,
        "discard_positive": settings.discard_positive,
        "discard_negative": settings.discard_negative,
        "duration_units": _units_to_names(settings.duration_units),
    }
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

"""
Save-time checks over entity records.

Only primary-key emptiness is checked. Range, uniqueness and cross-field rules
are out of scope; uniqueness is left to the storage layer.
"""

from __future__ import annotations

from .fields import EntityRecord, FieldKind


def empty_primary_keys(record: EntityRecord) -> list[str]:
    """Keys of the textual primary-key fields holding an empty string, in order."""
    return [
        record[i].key
        for i in record.primary_indices()
        if record[i].kind is FieldKind.TEXT and record[i].value == ""
    ]


def is_valid(record: EntityRecord) -> bool:
    """
    Return True if every textual primary-key field holds a non-empty string.

    Numbers, dates, durations and enums always carry a value and are never
    rejected.
    """
    return not empty_primary_keys(record)


def has_primary_changed(original: EntityRecord | None, draft: EntityRecord) -> bool:
    """
    Return True if any primary-key field of ``draft`` differs from ``original``.

    A missing original (new entity) never counts as a change.
    """
    if original is None:
        return False
    return any(original[i].value != draft[i].value for i in draft.primary_indices())

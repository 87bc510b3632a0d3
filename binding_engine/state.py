"""
Session-scoped state shared by controls.

Controls never hold their entity record directly. They hold a ``FieldRef``
(record handle + field index) and resolve it through the ``RecordRegistry`` of
the session that owns the record.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterator

from .errors import UnknownRecordError
from .fields import EntityRecord

RecordHandle = int


@dataclass(frozen=True, slots=True)
class FieldRef:
    """
    Address of one field inside a registered record.

    Attributes
    ----------
    handle:
        Handle returned by ``RecordRegistry.register``.
    index:
        Field index within the record.
    """

    handle: RecordHandle
    index: int


@dataclass(slots=True)
class DirtyTracker:
    """Records whether the editing session holds unsaved edits."""

    modified: bool = False

    def mark(self) -> None:
        self.modified = True

    def reset(self) -> None:
        self.modified = False


@dataclass(slots=True)
class RecordRegistry:
    """Handle table for the records owned by one editing session."""

    _records: dict[RecordHandle, EntityRecord] = field(default_factory=dict)
    _counter: Iterator[int] = field(default_factory=lambda: itertools.count(1))

    def register(self, record: EntityRecord) -> RecordHandle:
        """Register ``record`` and return its handle."""
        handle = next(self._counter)
        self._records[handle] = record
        return handle

    def resolve(self, handle: RecordHandle) -> EntityRecord:
        """
        Return the record registered under ``handle``.

        Raises
        ------
        UnknownRecordError
            If the handle was never registered or has been released.
        """
        try:
            return self._records[handle]
        except KeyError:
            raise UnknownRecordError(f"Unknown record handle: {handle}") from None

    def release(self, handle: RecordHandle) -> None:
        """Forget ``handle``. Releasing an unknown handle is a no-op."""
        self._records.pop(handle, None)

    def __contains__(self, handle: object) -> bool:
        return handle in self._records

    def __len__(self) -> int:
        return len(self._records)

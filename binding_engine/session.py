"""
Editing session: the state owned by one open editor.

A session owns the draft record, its record registry, the dirty tracker and
the control list. The original record (when editing an existing entity) is owned
by the caller and only read.
"""

from __future__ import annotations

import copy
from typing import Callable

from .control_registry import ControlOptions, create_controls
from .controls import Control
from .errors import ControlIndexError
from .fields import EntityRecord
from .persistence import SaveStatus, save
from .state import DirtyTracker, RecordHandle, RecordRegistry
from .store.api import EntityStorage


class EditingSession:
    """
    Session-scoped binding state for one draft record.

    Parameters
    ----------
    draft:
        Record edited in place by the session's controls.
    original:
        Stored snapshot being edited, or None when creating a new entity.
    """

    def __init__(self, draft: EntityRecord, original: EntityRecord | None = None) -> None:
        self.records = RecordRegistry()
        self.handle: RecordHandle = self.records.register(draft)
        self.tracker = DirtyTracker()
        self.controls: list[Control] = []
        self.original = original

    @classmethod
    def for_entity(cls, original: EntityRecord) -> "EditingSession":
        """Open a session editing a clone of ``original``."""
        return cls(original.clone(), original)

    @property
    def draft(self) -> EntityRecord:
        return self.records.resolve(self.handle)

    @property
    def modified(self) -> bool:
        return self.tracker.modified

    def create_default_controls(self, options: ControlOptions | None = None) -> list[Control]:
        """See ``control_registry.create_controls``."""
        return create_controls(self, options)

    def initialize_control_values(self, initial: EntityRecord) -> None:
        """
        Load every control from ``initial``, then clear the dirty flag.

        Values are deep-copied, so edits to the draft never reach ``initial``.
        """
        for control, descriptor in zip(self.controls, initial):
            control.set(copy.deepcopy(descriptor.value))
        self.tracker.reset()

    def replace_control(self, index: int, control: Control) -> None:
        """
        Swap the control at ``index`` for a caller-built variant.

        Raises
        ------
        ControlIndexError
            If ``control`` is not bound to field ``index`` of this session's draft.
        """
        if control.ref.handle != self.handle or control.index != index:
            raise ControlIndexError(
                f"Control bound to {control.ref} cannot replace index {index}."
            )
        self.controls[index] = control

    def add_listeners(self, listener: Callable[[], None]) -> None:
        """Attach the same listener to every control."""
        for control in self.controls:
            control.add_listener(listener)

    def get_control(self, key: str) -> Control | None:
        """Return the control bound to field ``key``, or None."""
        for control in self.controls:
            if control.key == key:
                return control
        return None

    async def save(self, storage: EntityStorage) -> SaveStatus:
        """
        Save the draft through ``persistence.save``.

        A successful save clears the dirty flag and makes a snapshot of the
        draft the new original, so a second save updates instead of creating.
        """
        status = await save(storage, self.original, self.draft)
        if status is not SaveStatus.INVALID:
            self.mark_saved(self.draft.clone())
        return status

    def mark_saved(self, snapshot: EntityRecord) -> None:
        """Record ``snapshot`` as the stored original and clear the dirty flag."""
        self.original = snapshot
        self.tracker.reset()

    def close(self) -> None:
        """Release the draft and drop the controls."""
        self.controls.clear()
        self.records.release(self.handle)

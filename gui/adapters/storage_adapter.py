"""Qt adapter for entity storage.

The engine owns persistence. The GUI talks to this adapter via signals/slots to
avoid blocking the UI thread and to avoid exposing SQLite or engine internals.

Threading model
--------------
- A single worker QObject lives on a dedicated QThread.
- The worker owns the SqliteEntityStorage and drives its coroutines with
  ``asyncio.run``; each request gets a fresh event loop on the worker thread.
- The GUI sends snapshots (clones) of records, never the live draft, so the
  draft is only ever touched on the UI thread.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from binding_engine.fields import EntityRecord
from binding_engine.persistence import save
from binding_engine.store.errors import UnknownEntityError
from binding_engine.store.sqlite_store import RecordFactory, open_entity_storage

logger = logging.getLogger(__name__)


class EntityStorageWorker(QObject):
    """Worker that owns the entity storage and runs in a background thread."""

    entities_loaded = Signal(object)  # list[EntityRecord]
    saved = Signal(str, object)  # SaveStatus value, saved snapshot
    deleted = Signal(object)  # deleted record
    unknown_entity = Signal(str)  # message
    error = Signal(str)  # message

    def __init__(self, factory: RecordFactory, data_root: Path | None) -> None:
        super().__init__()
        self._storage = open_entity_storage(factory, data_root=data_root)

    @Slot()
    def list_entities(self) -> None:
        """Load every stored record and emit them."""
        try:
            records = asyncio.run(self._storage.list_all())
        except Exception as e:
            logger.exception("Listing %s failed", self._storage.kind)
            self.error.emit(str(e))
            return
        self.entities_loaded.emit(records)

    @Slot(object, object)
    def save_record(self, original: object, draft: object) -> None:
        """Save ``draft`` against ``original`` and emit the outcome."""
        try:
            assert original is None or isinstance(original, EntityRecord)
            assert isinstance(draft, EntityRecord)
            status = asyncio.run(save(self._storage, original, draft))
        except UnknownEntityError as e:
            self.unknown_entity.emit(str(e))
            return
        except Exception as e:
            logger.exception("Saving %s failed", self._storage.kind)
            self.error.emit(str(e))
            return
        self.saved.emit(status.value, draft)

    @Slot(object)
    def delete_record(self, record: object) -> None:
        """Delete ``record`` and emit completion."""
        try:
            assert isinstance(record, EntityRecord)
            asyncio.run(self._storage.delete(record))
        except UnknownEntityError as e:
            self.unknown_entity.emit(str(e))
            return
        except Exception as e:
            logger.exception("Deleting %s failed", self._storage.kind)
            self.error.emit(str(e))
            return
        self.deleted.emit(record)


class EntityStorageAdapter(QObject):
    """Qt adapter that marshals storage calls onto a worker thread."""

    # Requests (GUI emits these; wired as queued connections to worker slots)
    request_list = Signal()
    request_save = Signal(object, object)
    request_delete = Signal(object)

    # Results (worker emits; adapter forwards)
    entities_loaded = Signal(object)
    saved = Signal(str, object)
    deleted = Signal(object)
    unknown_entity = Signal(str)
    error = Signal(str)

    def __init__(self, factory: RecordFactory, data_root: Path | None = None) -> None:
        super().__init__()

        self._thread = QThread()
        self._worker = EntityStorageWorker(factory=factory, data_root=data_root)
        self._worker.moveToThread(self._thread)

        self.request_list.connect(
            self._worker.list_entities, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_save.connect(
            self._worker.save_record, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_delete.connect(
            self._worker.delete_record, type=Qt.ConnectionType.QueuedConnection
        )

        self._worker.entities_loaded.connect(self.entities_loaded)
        self._worker.saved.connect(self.saved)
        self._worker.deleted.connect(self.deleted)
        self._worker.unknown_entity.connect(self.unknown_entity)
        self._worker.error.connect(self.error)

        self._thread.start()

    def save_snapshot(self, original: EntityRecord | None, draft: EntityRecord) -> None:
        """Queue a save of a snapshot of ``draft``."""
        self.request_save.emit(original, draft.clone())

    def shutdown(self) -> None:
        """Stop the worker thread cleanly."""
        self._thread.quit()
        self._thread.wait()


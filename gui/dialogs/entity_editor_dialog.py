"""
Entity editor dialog.

Purpose
-------
- Render one editing session as a form of control widgets.
- Save or delete through the storage adapter, off the UI thread.
- Ask before discarding unsaved edits.

Notes
-----
- The dialog never touches storage directly; it only emits adapter requests
  and reacts to adapter results.
- While a request is in flight the form is disabled so the draft cannot change
  under the snapshot being saved.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from binding_engine.chooser import ChooserRequest
from binding_engine.controls import Control, ControlGroup
from binding_engine.fields import split_words
from binding_engine.persistence import SaveStatus
from binding_engine.session import EditingSession
from binding_engine.validation import empty_primary_keys
from gui.adapters.storage_adapter import EntityStorageAdapter
from gui.settings_store import EditorSettings
from gui.widgets import ItemParser, build_form


class EntityEditorDialog(QDialog):
    """
    Dialog editing the draft of one ``EditingSession``.

    Signals
    -------
    entity_saved:
        Emitted with the saved snapshot after a create or update.
    entity_deleted:
        Emitted with the deleted record.
    """

    entity_saved = Signal(object)
    entity_deleted = Signal(object)

    def __init__(
        self,
        session: EditingSession,
        store: EntityStorageAdapter,
        settings: EditorSettings,
        parent: QWidget | None = None,
        *,
        items: Sequence[Control | ControlGroup] | None = None,
        choosers: Mapping[str, ChooserRequest] | None = None,
        parsers: Mapping[str, ItemParser] | None = None,
    ) -> None:
        """
        Initialize the editor.

        Parameters
        ----------
        session:
            Session whose controls are already created.
        store:
            Storage adapter shared with the owning window.
        settings:
            Discard prompt texts.
        items:
            Layout of controls and groups; defaults to the session's controls.
        choosers, parsers:
            Per-field add sources for list controls.
        """
        super().__init__(parent)
        self.setWindowTitle(f"Edit {session.draft.name}")
        self.setModal(True)
        self.resize(560, 640)

        self._session = session
        self._store = store
        self._settings = settings
        self._busy = False

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self._form = build_form(
            list(items) if items is not None else session.controls,
            choosers=choosers,
            parsers=parsers,
        )
        scroll.setWidget(self._form)
        root.addWidget(scroll, 1)

        footer = QHBoxLayout()
        self.dirty_label = QLabel("")
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #666;")
        self.btn_delete = QPushButton("Delete")
        self.btn_save = QPushButton("Save")
        self.btn_close = QPushButton("Close")
        footer.addWidget(self.dirty_label)
        footer.addWidget(self.status_label)
        footer.addStretch(1)
        footer.addWidget(self.btn_delete)
        footer.addWidget(self.btn_save)
        footer.addWidget(self.btn_close)
        root.addLayout(footer)

        self.btn_save.clicked.connect(self._save)
        self.btn_delete.clicked.connect(self._delete)
        self.btn_close.clicked.connect(self.reject)

        self._store.saved.connect(self._on_saved)
        self._store.deleted.connect(self._on_deleted)
        self._store.unknown_entity.connect(self._on_store_error)
        self._store.error.connect(self._on_store_error)

        session.add_listeners(self._sync_dirty_state)
        self._sync_dirty_state()

    # ---------- State ----------

    def _set_status(self, text: str) -> None:
        self.status_label.setText(text)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self._form.setEnabled(not busy)
        self._sync_dirty_state()

    def _sync_dirty_state(self) -> None:
        modified = self._session.modified
        self.dirty_label.setText("Unsaved changes" if modified else "")
        self.btn_save.setEnabled(not self._busy and (modified or self._session.original is None))
        self.btn_delete.setEnabled(not self._busy and self._session.original is not None)

    # ---------- Save / delete ----------

    def _save(self) -> None:
        self._set_status("Saving…")
        self._set_busy(True)
        self._store.save_snapshot(self._session.original, self._session.draft)

    def _delete(self) -> None:
        original = self._session.original
        if original is None:
            return
        ok = QMessageBox.question(
            self,
            "Delete entity",
            f"Delete this {original.name}?\n\n{original[0].value}",
        )
        if ok != QMessageBox.StandardButton.Yes:
            return
        self._set_status("Deleting…")
        self._set_busy(True)
        self._store.request_delete.emit(original)

    def _on_saved(self, status_value: str, snapshot: object) -> None:
        if not self._busy:
            return
        status = SaveStatus(status_value)
        self._set_busy(False)
        if status is SaveStatus.INVALID:
            self._set_status("")
            QMessageBox.warning(
                self,
                "Cannot save",
                f"{split_words(empty_primary_keys(self._session.draft)[0])} must not be empty.",
            )
            return
        self._session.mark_saved(snapshot)  # type: ignore[arg-type]
        self._set_status("Created" if status is SaveStatus.CREATED else "Saved")
        self._sync_dirty_state()
        self.entity_saved.emit(snapshot)

    def _on_deleted(self, record: object) -> None:
        if not self._busy:
            return
        self._busy = False
        self._session.tracker.reset()
        self.entity_deleted.emit(record)
        self.accept()

    def _on_store_error(self, message: str) -> None:
        if not self._busy:
            return
        self._set_busy(False)
        self._set_status("Error")
        QMessageBox.critical(self, "Entity Store Error", message)

    # ---------- Close ----------

    def _confirm_discard(self) -> bool:
        if not self._session.modified:
            return True
        s = self._settings
        box = QMessageBox(self)
        box.setIcon(QMessageBox.Icon.Warning)
        box.setWindowTitle(s.discard_title)
        box.setText(s.discard_body)
        discard = box.addButton(s.discard_positive, QMessageBox.ButtonRole.DestructiveRole)
        box.addButton(s.discard_negative, QMessageBox.ButtonRole.RejectRole)
        box.exec()
        return box.clickedButton() is discard

    def reject(self) -> None:  # type: ignore[override]
        if self._busy or not self._confirm_discard():
            return
        super().reject()

    def done(self, result: int) -> None:  # type: ignore[override]
        self._store.saved.disconnect(self._on_saved)
        self._store.deleted.disconnect(self._on_deleted)
        self._store.unknown_entity.disconnect(self._on_store_error)
        self._store.error.disconnect(self._on_store_error)
        self._session.close()
        super().done(result)

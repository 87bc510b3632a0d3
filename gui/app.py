"""
Entity Binder demo GUI.

A list window of stored car washes backed by the SQLite entity store. Picking an
entry opens an editor dialog on a clone of it; "New" opens one on a default
record.
"""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from binding_engine.fields import EntityRecord
from binding_engine.listing import EntityListing
from binding_engine.session import EditingSession
from gui.adapters.storage_adapter import EntityStorageAdapter
from gui.demo_model import build_car_wash_form, new_car_wash
from gui.dialogs.entity_editor_dialog import EntityEditorDialog
from gui.settings_store import load_editor_settings


def _subtitle(record: EntityRecord) -> str:
    return f"{record.field('bays').value} bays, {record.field('mountStyle').value.name.lower()}"


class AppWindow(QWidget):
    """
    Main window listing stored entities.

    Responsibilities
    ----------------
    - Show stored entities sorted by title
    - Open editors for new and existing entities
    - Coordinate clean shutdown of the storage worker
    """

    def __init__(self, data_root: Path | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Entity Binder")
        self.resize(520, 640)

        self._settings = load_editor_settings(data_root=data_root)
        self._listing = EntityListing(subtitle=_subtitle)
        self._store = EntityStorageAdapter(new_car_wash, data_root=data_root)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        title = QLabel("Car washes")
        f = title.font()
        f.setPointSize(16)
        f.setBold(True)
        title.setFont(f)
        root.addWidget(title)

        self.list = QListWidget()
        self.list.itemActivated.connect(self._open_item)
        root.addWidget(self.list, 1)

        buttons = QHBoxLayout()
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #666;")
        btn_new = QPushButton("New")
        btn_refresh = QPushButton("Refresh")
        btn_new.clicked.connect(self._open_new)
        btn_refresh.clicked.connect(self._refresh)
        buttons.addWidget(self.status_label)
        buttons.addStretch(1)
        buttons.addWidget(btn_refresh)
        buttons.addWidget(btn_new)
        root.addLayout(buttons)

        self._store.entities_loaded.connect(self._on_entities_loaded)
        self._store.error.connect(self._on_store_error)
        self._refresh()

    def _refresh(self) -> None:
        self.status_label.setText("Loading…")
        self._store.request_list.emit()

    def _on_entities_loaded(self, records: object) -> None:
        assert isinstance(records, list)
        self.list.clear()
        for entry in self._listing.entries(records):
            text = entry.title or "(unnamed)"
            if entry.subtitle:
                text = f"{text}\n{entry.subtitle}"
            item = QListWidgetItem(text)
            item.setData(Qt.ItemDataRole.UserRole, entry.record)
            self.list.addItem(item)
        self.status_label.setText(f"{self.list.count()} stored")

    def _on_store_error(self, message: str) -> None:
        if self.isActiveWindow():
            self.status_label.setText("Error")
            QMessageBox.critical(self, "Entity Store Error", message)

    def _open_item(self, item: QListWidgetItem) -> None:
        self._edit(EditingSession.for_entity(item.data(Qt.ItemDataRole.UserRole)))

    def _open_new(self) -> None:
        self._edit(EditingSession(new_car_wash()))

    def _edit(self, session: EditingSession) -> None:
        items, choosers, parsers = build_car_wash_form(
            session, duration_units=self._settings.duration_units
        )
        dlg = EntityEditorDialog(
            session,
            self._store,
            self._settings,
            self,
            items=items,
            choosers=choosers,
            parsers=parsers,
        )
        dlg.entity_saved.connect(lambda _record: self._refresh())
        dlg.entity_deleted.connect(lambda _record: self._refresh())
        dlg.exec()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Shut down the storage worker before closing."""
        try:
            self._store.shutdown()
        finally:
            super().closeEvent(event)


def main(data_root: Path | None = None) -> int:
    """
    Run the Entity Binder GUI.

    Returns
    -------
    int
        Qt application exit code.
    """
    app = QApplication(sys.argv)
    w = AppWindow(data_root)
    w.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

"""
Qt widgets for binding-engine controls.

Each builder creates the widget for one control variant and wires its edit
signals to the control's edit protocol. Widgets never write fields directly.

Notes
-----
- Text edits call ``set_value`` with the parsed display value.
- Date/time edits go through ``DateTimeControl.apply_text`` using the text the
  editor shows in the control's mode.
- List widgets refresh from the field whenever the control notifies.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from PySide6.QtCore import QDate, QDateTime, Qt, QTime
from PySide6.QtGui import QAction, QDoubleValidator, QIntValidator
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QCompleter,
    QDateTimeEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from binding_engine.chooser import ChooserRequest, add_parsed, remember_item_extent
from binding_engine.controls import (
    Control,
    ControlGroup,
    CustomControl,
    DateTimeControl,
    DateTimeMode,
    DurationControl,
    EnumControl,
    IntControl,
    ListControl,
)
from binding_engine.fields import FieldKind, split_words

ItemParser = Callable[[str], Any]

_QT_FORMATS: Mapping[DateTimeMode, str] = {
    DateTimeMode.DATE: "yyyy-MM-dd",
    DateTimeMode.TIME: "HH:mm:ss",
    DateTimeMode.BOTH: "yyyy-MM-ddTHH:mm:ss",
}

_SPIN_CEILING = 2**31 - 1


def _with_label(editor: QWidget, label: str | None) -> QWidget:
    if not label:
        return editor
    row = QWidget()
    layout = QHBoxLayout(row)
    layout.setContentsMargins(0, 0, 0, 0)
    layout.addWidget(editor, 1)
    layout.addWidget(QLabel(label))
    return row


def _text_widget(control: Control) -> QWidget:
    edit = QLineEdit()
    edit.setText(str(control.display or ""))
    edit.setPlaceholderText(control.hint)
    edit.setReadOnly(control.read_only)

    kind = control.member.kind
    if kind is FieldKind.INTEGER:
        edit.setValidator(QIntValidator(edit))
    elif kind is FieldKind.REAL:
        edit.setValidator(QDoubleValidator(edit))

    if control.complete_values:
        completer = QCompleter(control.complete_values, edit)
        completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        edit.setCompleter(completer)

    def _sync_echo() -> None:
        mode = QLineEdit.EchoMode.Password if control.masked else QLineEdit.EchoMode.Normal
        edit.setEchoMode(mode)

    if control.obscure:
        _sync_echo()
        reveal = QAction("Show", edit)
        edit.addAction(reveal, QLineEdit.ActionPosition.TrailingPosition)
        reveal.triggered.connect(lambda: (control.toggle_obscured(), _sync_echo()))

    def _on_edited(text: str) -> None:
        control.display = text
        control.set_value(control.parse_text(text))

    edit.textEdited.connect(_on_edited)
    return _with_label(edit, control.label)


def _toggle_widget(control: Control) -> QWidget:
    box = QCheckBox(control.hint if control.checkbox else "")
    box.setChecked(bool(control.display))
    box.setEnabled(not control.read_only)

    def _on_toggled(checked: bool) -> None:
        control.display = checked
        control.set_value(checked)

    box.toggled.connect(_on_toggled)
    return _with_label(box, control.label)


def _int_widget(control: IntControl) -> QWidget:
    spin = QSpinBox()
    spin.setRange(control.min_value, control.max_value)
    spin.setSingleStep(control.step)
    spin.setValue(int(control.member.value))
    spin.setReadOnly(control.read_only)

    def _on_changed(value: int) -> None:
        control.display = str(value)
        control.set_value(value)

    spin.valueChanged.connect(_on_changed)
    return _with_label(spin, control.label)


def _enum_widget(control: EnumControl) -> QWidget:
    combo = QComboBox()
    combo.addItems(control.choice_labels())
    combo.setCurrentIndex(control.current_index())
    combo.setEnabled(not control.read_only)
    combo.currentIndexChanged.connect(control.select)
    return _with_label(combo, control.label)


def _datetime_widget(control: DateTimeControl) -> QWidget:
    edit = QDateTimeEdit()
    fmt = _QT_FORMATS[control.mode]
    edit.setDisplayFormat(fmt)
    edit.setCalendarPopup(control.mode is not DateTimeMode.TIME)
    edit.setMinimumDate(QDate(max(control.first_year, 1), 1, 1))
    edit.setReadOnly(control.read_only)

    value = control.member.value
    edit.setDateTime(
        QDateTime(
            QDate(value.year, value.month, value.day),
            QTime(value.hour, value.minute, value.second),
        )
    )

    def _on_changed(qdt: QDateTime) -> None:
        control.apply_text(qdt.toString(fmt))

    edit.dateTimeChanged.connect(_on_changed)
    return _with_label(edit, control.label)


def _duration_widget(control: DurationControl) -> QWidget:
    row = QWidget()
    layout = QHBoxLayout(row)
    layout.setContentsMargins(0, 0, 0, 0)

    for unit in control.visible_units():
        spin = QSpinBox()
        current = control.components.get(unit, 0)
        ceiling = control.component_max(unit)
        # The display cap on the largest unit must not clip a stored value.
        spin.setRange(0, _SPIN_CEILING if ceiling is None else max(ceiling, current))
        spin.setSingleStep(control.step)
        spin.setValue(current)
        spin.setSuffix(f" {control.labels[unit]}")
        spin.setReadOnly(control.read_only)
        spin.valueChanged.connect(lambda v, u=unit: control.set_component(u, v))
        layout.addWidget(spin)

    layout.addStretch(1)
    return _with_label(row, control.label)


class ChooserDialog(QDialog):
    """Modal picker listing the candidates of a ``ChooserRequest``."""

    def __init__(
        self, request: ChooserRequest, control: Control, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(request.title)
        self.setModal(True)
        self.resize(420, 480)

        self._request = request
        self._control = control

        root = QVBoxLayout(self)
        self.list = QListWidget()
        self.list.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        for entry in request.entries():
            text = entry.title if entry.subtitle is None else f"{entry.title}\n{entry.subtitle}"
            self.list.addItem(QListWidgetItem(text))
        root.addWidget(self.list, 1)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        self.list.itemDoubleClicked.connect(lambda _item: self.accept())
        root.addWidget(buttons)

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if self.list.count():
            remember_item_extent(self._control, float(self.list.sizeHintForRow(0)))
        offset = self._request.initial_scroll_offset(self._control)
        if offset is not None:
            self.list.verticalScrollBar().setValue(int(offset))

    def chosen_row(self) -> int | None:
        row = self.list.currentRow()
        return row if row >= 0 else None


def _list_widget(
    control: ListControl,
    chooser: ChooserRequest | None,
    parser: ItemParser | None,
) -> QWidget:
    box = QWidget()
    layout = QVBoxLayout(box)
    layout.setContentsMargins(0, 0, 0, 0)

    lst = QListWidget()
    lst.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
    layout.addWidget(lst, 1)

    def _item_text(item: Any) -> str:
        if control.render_card is not None:
            return str(control.render_card(item))
        return str(item)

    def _refresh() -> None:
        lst.clear()
        for item in control.sorted_items():
            entry = QListWidgetItem(_item_text(item))
            entry.setData(Qt.ItemDataRole.UserRole, item)
            lst.addItem(entry)

    buttons = QHBoxLayout()
    btn_add = QPushButton("Add…")
    btn_remove = QPushButton("Remove")
    btn_add.setEnabled(not control.read_only and (chooser is not None or parser is not None))
    btn_remove.setEnabled(False)
    buttons.addWidget(btn_add)
    buttons.addWidget(btn_remove)
    buttons.addStretch(1)
    layout.addLayout(buttons)

    def _on_add() -> None:
        if chooser is not None:
            dlg = ChooserDialog(chooser, control, box)
            if dlg.exec() != QDialog.DialogCode.Accepted:
                return
            row = dlg.chosen_row()
            if row is not None and not chooser.choose(control, row):
                QMessageBox.information(box, chooser.title, "That item is already in the list.")
            return
        assert parser is not None
        text, ok = QInputDialog.getText(box, "Add item", control.hint or split_words(control.key))
        if ok and not add_parsed(control, text.strip(), parser):
            QMessageBox.warning(box, "Add item", f"Not a valid value: {text!r}")

    def _on_remove() -> None:
        chosen = [entry.data(Qt.ItemDataRole.UserRole) for entry in lst.selectedItems()]
        for value in chosen:
            control.remove(value)

    btn_add.clicked.connect(_on_add)
    btn_remove.clicked.connect(_on_remove)
    lst.itemSelectionChanged.connect(
        lambda: btn_remove.setEnabled(not control.read_only and bool(lst.selectedItems()))
    )
    control.add_listener(_refresh)
    _refresh()
    return box


def _custom_widget(control: CustomControl) -> QWidget:
    rendered = control.render()
    if isinstance(rendered, QWidget):
        return rendered
    return QLabel("" if rendered is None else str(rendered))


def build_control_widget(
    control: Control,
    *,
    chooser: ChooserRequest | None = None,
    parser: ItemParser | None = None,
) -> QWidget:
    """
    Build the widget for one control.

    Parameters
    ----------
    control:
        Control to render.
    chooser:
        Candidate pool for a list control's Add button.
    parser:
        Free-text parser for a list control's Add button, used when no chooser
        is given.
    """
    if isinstance(control, CustomControl):
        return _custom_widget(control)
    if isinstance(control, ListControl):
        return _list_widget(control, chooser, parser)
    if isinstance(control, DurationControl):
        return _duration_widget(control)
    if isinstance(control, DateTimeControl):
        return _datetime_widget(control)
    if isinstance(control, EnumControl):
        return _enum_widget(control)
    if isinstance(control, IntControl):
        return _int_widget(control)
    if control.toggle:
        return _toggle_widget(control)
    return _text_widget(control)


def build_form(
    items: Sequence[Control | ControlGroup],
    *,
    choosers: Mapping[str, ChooserRequest] | None = None,
    parsers: Mapping[str, ItemParser] | None = None,
) -> QWidget:
    """
    Lay out controls and control groups as a form.

    Groups become titled boxes; loose controls are added as labelled rows.
    """
    choosers = choosers or {}
    parsers = parsers or {}

    def _add_rows(form: QFormLayout, controls: Sequence[Control]) -> None:
        for control in controls:
            widget = build_control_widget(
                control,
                chooser=choosers.get(control.key),
                parser=parsers.get(control.key),
            )
            form.addRow(split_words(control.key), widget)

    page = QWidget()
    root = QVBoxLayout(page)
    loose = QFormLayout()
    root.addLayout(loose)

    for item in items:
        if isinstance(item, ControlGroup):
            group = QGroupBox(item.title)
            form = QFormLayout(group)
            _add_rows(form, item.items)
            root.addWidget(group)
        else:
            _add_rows(loose, [item])

    root.addStretch(1)
    return page

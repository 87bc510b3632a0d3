"""
Widget translation tests.

These run Qt offscreen and drive widgets through their signals, checking that
edits land in the bound fields.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from kitchen_sink_model import MountStyle

from binding_engine.controls import DurationControl
from binding_engine.duration import DurationUnit
from binding_engine.session import EditingSession
from binding_engine.state import FieldRef

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from gui.widgets import build_control_widget, build_form  # noqa: E402


@pytest.fixture(scope="module")
def qapp() -> object:
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.mark.usefixtures("qapp")
def test_text_edit_writes_field(session: EditingSession) -> None:
    edit = build_control_widget(session.controls[0])
    assert isinstance(edit, QtWidgets.QLineEdit)
    assert edit.text() == "Main"

    edit.textEdited.emit("Other")

    assert session.draft[0].value == "Other"
    assert session.modified


@pytest.mark.usefixtures("qapp")
def test_enum_combo_selects_member(session: EditingSession) -> None:
    combo = build_control_widget(session.get_control("mountStyle"))  # type: ignore[arg-type]
    assert isinstance(combo, QtWidgets.QComboBox)
    assert combo.currentIndex() == 1

    combo.setCurrentIndex(2)

    assert session.draft.field("mountStyle").value is MountStyle.FREE_STANDING


@pytest.mark.usefixtures("qapp")
def test_duration_spin_boxes_are_bounded(session: EditingSession) -> None:
    row = build_control_widget(session.get_control("fillTime"))  # type: ignore[arg-type]
    hours, minutes, seconds = row.findChildren(QtWidgets.QSpinBox)
    assert (hours.value(), minutes.value(), seconds.value()) == (0, 2, 30)
    assert minutes.maximum() == 59
    assert seconds.maximum() == 59

    hours.setValue(1)

    assert session.draft.field("fillTime").value.total_seconds() == 3750


@pytest.mark.usefixtures("qapp")
def test_list_widget_follows_field(session: EditingSession) -> None:
    control = session.get_control("bayDepth")
    box = build_control_widget(control)  # type: ignore[arg-type]
    (lst,) = box.findChildren(QtWidgets.QListWidget)
    assert lst.count() == 2

    control.add(14.0)  # type: ignore[union-attr]

    assert lst.count() == 3


@pytest.mark.usefixtures("qapp")
def test_build_form_has_row_per_control(session: EditingSession) -> None:
    page = build_form(session.controls)
    (form,) = page.findChildren(QtWidgets.QFormLayout)
    assert form.rowCount() == len(session.controls)


@pytest.mark.usefixtures("qapp")
def test_duration_spin_keeps_value_above_display_cap(session: EditingSession) -> None:
    session.draft.field("fillTime").value = timedelta(hours=20)
    ref = FieldRef(session.handle, session.draft.index_of("fillTime"))
    control = DurationControl(
        session.records, ref, units=DurationUnit.MINUTES | DurationUnit.SECONDS
    )
    row = build_control_widget(control)
    minutes, seconds = row.findChildren(QtWidgets.QSpinBox)

    assert minutes.value() == 1200
    assert minutes.maximum() >= 1200
    assert session.draft.field("fillTime").value == timedelta(hours=20)

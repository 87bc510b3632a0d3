"""
Demo entity used by the GUI: a car wash with one field of every kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping

from PySide6.QtGui import QColor
from PySide6.QtWidgets import QColorDialog, QHBoxLayout, QLabel, QPushButton, QWidget

from binding_engine.chooser import ChooserRequest
from binding_engine.controls import (
    Control,
    ControlGroup,
    CustomControl,
    DateTimeMode,
    IntControl,
)
from binding_engine.fields import EntityRecord, FieldDescriptor, FieldKind
from binding_engine.session import EditingSession

KIND_NAME = "CarWash"


class MountStyle(Enum):
    WALL = "wall"
    CEILING = "ceiling"
    FREE_STANDING = "free_standing"


@dataclass(frozen=True, slots=True)
class GarbageDisposal:
    brand: str
    horsepower: float

    def to_json(self) -> Mapping[str, Any]:
        return {"brand": self.brand, "horsepower": self.horsepower}

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "GarbageDisposal":
        return cls(brand=str(payload["brand"]), horsepower=float(payload["horsepower"]))

    def __str__(self) -> str:
        return f"{self.brand} ({self.horsepower:g} hp)"


@dataclass(frozen=True, slots=True)
class Color:
    red: int
    green: int
    blue: int

    def to_json(self) -> Mapping[str, Any]:
        return {"red": self.red, "green": self.green, "blue": self.blue}

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Color":
        return cls(red=int(payload["red"]), green=int(payload["green"]), blue=int(payload["blue"]))


DISPOSALS = (
    GarbageDisposal("InSinkErator", 0.5),
    GarbageDisposal("InSinkErator", 1.0),
    GarbageDisposal("Waste King", 0.75),
    GarbageDisposal("Moen", 0.33),
)


def new_car_wash() -> EntityRecord:
    """Default record of the demo kind."""
    return EntityRecord(
        KIND_NAME,
        [
            FieldDescriptor("name", ""),
            FieldDescriptor("bays", 2),
            FieldDescriptor("sprayerHoseLength", 0.0),
            FieldDescriptor("mountStyle", MountStyle.WALL),
            FieldDescriptor("instantHotWater", False),
            FieldDescriptor("accessCode", ""),
            FieldDescriptor("logo", b""),
            FieldDescriptor("installed", datetime(2000, 1, 1)),
            FieldDescriptor("fillTime", timedelta(minutes=5)),
            FieldDescriptor("bayDepth", [], kind=FieldKind.LIST),
            FieldDescriptor(
                "disposals", [], kind=FieldKind.ENTITY_LIST, value_type=GarbageDisposal
            ),
            FieldDescriptor("color", Color(0, 90, 160)),
        ],
    )


def _color_widget(control: CustomControl) -> QWidget:
    row = QWidget()
    layout = QHBoxLayout(row)
    layout.setContentsMargins(0, 0, 0, 0)
    swatch = QLabel()
    swatch.setFixedSize(48, 20)
    button = QPushButton("Pick…")

    def _paint() -> None:
        c = control.member.value
        swatch.setStyleSheet(f"background: rgb({c.red}, {c.green}, {c.blue});")

    def _pick() -> None:
        c = control.member.value
        chosen = QColorDialog.getColor(QColor(c.red, c.green, c.blue), row)
        if chosen.isValid():
            control.set_value(Color(chosen.red(), chosen.green(), chosen.blue()))
            _paint()

    button.clicked.connect(_pick)
    _paint()
    layout.addWidget(swatch)
    layout.addWidget(button)
    layout.addStretch(1)
    return row


def _logo_widget(control: CustomControl) -> QWidget:
    return QLabel(f"{len(control.member.value)} bytes")


def build_car_wash_form(
    session: EditingSession, *, duration_units: Any = None
) -> tuple[list[Control | ControlGroup], dict[str, ChooserRequest], dict[str, Any]]:
    """
    Create the demo controls and their layout.

    Returns
    -------
    tuple
        Form items, list choosers and list text parsers, ready for the editor.
    """
    fill_options: dict[str, Any] = {}
    if duration_units is not None:
        fill_options["units"] = duration_units

    session.create_default_controls(
        {
            "accessCode": {"obscure": True},
            "sprayerHoseLength": {"label": "ft", "as_int": True},
            "instantHotWater": {"checkbox": True},
            "installed": {"mode": DateTimeMode.DATE},
            "fillTime": fill_options,
            "logo": {"create_widget": _logo_widget},
            "color": {"create_widget": _color_widget},
            "bayDepth": {"sort_key": float},
        }
    )
    bays_index = session.draft.index_of("bays")
    session.replace_control(
        bays_index,
        IntControl(
            session.records,
            session.controls[bays_index].ref,
            tracker=session.tracker,
            min_value=1,
            max_value=12,
        ),
    )

    def _group(title: str, keys: tuple[str, ...]) -> ControlGroup:
        return ControlGroup(title, [session.controls[session.draft.index_of(k)] for k in keys])

    items: list[Control | ControlGroup] = [
        session.controls[0],
        _group("Equipment", ("bays", "sprayerHoseLength", "mountStyle", "instantHotWater")),
        _group("Site", ("accessCode", "installed", "fillTime", "color", "logo")),
        _group("Lists", ("bayDepth", "disposals")),
    ]
    choosers = {
        "disposals": ChooserRequest(
            title="Pick a disposal",
            items=DISPOSALS,
            to_string=lambda d: d.brand,
            to_subtitle=lambda d: f"{d.horsepower:g} hp",
        )
    }
    parsers = {"bayDepth": _parse_depth}
    return items, choosers, parsers


def _parse_depth(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None

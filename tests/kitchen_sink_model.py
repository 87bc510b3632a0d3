"""
Kitchen-sink entity shared by the tests: one field of every kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping

from binding_engine.fields import EntityRecord, FieldDescriptor, FieldKind

KIND_NAME = "KitchenSink"


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
        return cls(brand=payload["brand"], horsepower=payload["horsepower"])


@dataclass(frozen=True, slots=True)
class Color:
    red: int
    green: int
    blue: int

    def to_json(self) -> Mapping[str, Any]:
        return {"red": self.red, "green": self.green, "blue": self.blue}

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Color":
        return cls(red=payload["red"], green=payload["green"], blue=payload["blue"])


INSTALLED = datetime(2021, 6, 15, 9, 30, 0)


def make_kitchen_sink(type_name: str = "Main") -> EntityRecord:
    return EntityRecord(
        KIND_NAME,
        [
            FieldDescriptor("type", type_name),
            FieldDescriptor("bays", 4),
            FieldDescriptor("sprayerHoseLength", 12.5),
            FieldDescriptor("mountStyle", MountStyle.CEILING),
            FieldDescriptor("instantHotWater", True),
            FieldDescriptor("image", b"\x89PNG"),
            FieldDescriptor("installed", INSTALLED),
            FieldDescriptor("fillTime", timedelta(minutes=2, seconds=30)),
            FieldDescriptor("bayDepth", [10.0, 12.0], kind=FieldKind.LIST),
            FieldDescriptor(
                "disposals",
                [GarbageDisposal("Moen", 0.5)],
                kind=FieldKind.ENTITY_LIST,
                value_type=GarbageDisposal,
            ),
            FieldDescriptor("color", Color(10, 20, 30)),
        ],
    )

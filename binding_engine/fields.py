"""
Field descriptors and entity records.

An entity record is an ordered, non-empty sequence of typed, named fields. The
field at index 0 is the canonical identity field and always participates in the
primary key, whatever its ``primary`` flag says.

Invariants
----------
- A descriptor's key, kind and primary flag never change after construction.
- A record is never reordered or resized; only field values are mutated.
"""

from __future__ import annotations

import copy
import re
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterator, Mapping, Protocol, Sequence, runtime_checkable

from .errors import EntityDefinitionError


class FieldKind(str, Enum):
    """Closed set of value kinds a field may hold."""

    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    ENUM = "enum"
    DATETIME = "datetime"
    DURATION = "duration"
    LIST = "list"
    ENTITY_LIST = "entity_list"
    BINARY = "binary"
    OBJECT = "object"


LIST_KINDS = frozenset({FieldKind.LIST, FieldKind.ENTITY_LIST})
NUMERIC_KINDS = frozenset({FieldKind.INTEGER, FieldKind.REAL})


@runtime_checkable
class Serializable(Protocol):
    """Objects stored in OBJECT and ENTITY_LIST fields."""

    def to_json(self) -> Mapping[str, Any]: ...

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> Any: ...


def infer_kind(value: object) -> FieldKind:
    """
    Infer the field kind for a Python value.

    Parameters
    ----------
    value:
        Initial field value.

    Returns
    -------
    FieldKind
        Kind matching the value's runtime type. ``bool`` is checked before
        ``int``; unrecognized values are treated as opaque objects.
    """
    if isinstance(value, bool):
        return FieldKind.BOOLEAN
    if isinstance(value, Enum):
        return FieldKind.ENUM
    if isinstance(value, datetime):
        return FieldKind.DATETIME
    if isinstance(value, timedelta):
        return FieldKind.DURATION
    if isinstance(value, (bytes, bytearray)):
        return FieldKind.BINARY
    if isinstance(value, (list, tuple)):
        return FieldKind.LIST
    if isinstance(value, str):
        return FieldKind.TEXT
    if isinstance(value, int):
        return FieldKind.INTEGER
    if isinstance(value, float):
        return FieldKind.REAL
    return FieldKind.OBJECT


class FieldDescriptor:
    """
    Metadata and mutable value holder for one entity field.

    Parameters
    ----------
    key:
        Field name, unique within its record.
    value:
        Initial value.
    primary:
        True if the field is part of the primary key. Index 0 is part of the
        key regardless of this flag.
    kind:
        Declared value kind. Inferred from ``value`` when omitted.
    value_type:
        Enum class for ENUM fields, item class for ENTITY_LIST fields, object
        class for OBJECT fields. Derived from ``value`` where possible.
    """

    __slots__ = ("_key", "_kind", "_primary", "_value_type", "value")

    def __init__(
        self,
        key: str,
        value: Any,
        primary: bool = False,
        *,
        kind: FieldKind | None = None,
        value_type: type | None = None,
    ) -> None:
        resolved = infer_kind(value) if kind is None else kind
        if resolved is FieldKind.LIST and isinstance(value, tuple):
            value = list(value)
        if value_type is None and resolved in (FieldKind.ENUM, FieldKind.OBJECT):
            value_type = type(value)

        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_kind", resolved)
        object.__setattr__(self, "_primary", primary)
        object.__setattr__(self, "_value_type", value_type)
        self.value = value

    def __setattr__(self, name: str, value: Any) -> None:
        if name != "value":
            raise AttributeError(f"FieldDescriptor.{name.lstrip('_')} is read-only")
        object.__setattr__(self, name, value)

    @property
    def key(self) -> str:
        return self._key

    @property
    def kind(self) -> FieldKind:
        return self._kind

    @property
    def primary(self) -> bool:
        return self._primary

    @property
    def value_type(self) -> type | None:
        return self._value_type

    def copy(self) -> "FieldDescriptor":
        """Return a descriptor with the same metadata and a deep copy of the value."""
        return FieldDescriptor(
            self._key,
            copy.deepcopy(self.value),
            self._primary,
            kind=self._kind,
            value_type=self._value_type,
        )

    def __repr__(self) -> str:
        flag = ", primary" if self._primary else ""
        return f"FieldDescriptor({self._key!r}, {self.value!r}, {self._kind.value}{flag})"


class EntityRecord:
    """
    Ordered, non-empty collection of field descriptors.

    Parameters
    ----------
    name:
        Entity type name. Storage uses it as the table/kind discriminator.
    fields:
        Field descriptors in declaration order.

    Raises
    ------
    EntityDefinitionError
        If ``fields`` is empty or contains duplicate keys.
    """

    __slots__ = ("_name", "_fields")

    def __init__(self, name: str, fields: Sequence[FieldDescriptor]) -> None:
        if not fields:
            raise EntityDefinitionError(f"Entity {name!r} must declare at least one field.")
        keys = [f.key for f in fields]
        if len(set(keys)) != len(keys):
            raise EntityDefinitionError(f"Entity {name!r} declares duplicate field keys.")
        self._name = name
        self._fields: tuple[FieldDescriptor, ...] = tuple(fields)

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self._fields[index]

    def index_of(self, key: str) -> int:
        """Return the index of ``key``, or raise ``KeyError``."""
        for index, f in enumerate(self._fields):
            if f.key == key:
                return index
        raise KeyError(key)

    def field(self, key: str) -> FieldDescriptor:
        """Return the descriptor named ``key``, or raise ``KeyError``."""
        return self._fields[self.index_of(key)]

    def primary_indices(self) -> tuple[int, ...]:
        """Indices of every field that participates in the primary key."""
        return tuple(i for i, f in enumerate(self._fields) if i == 0 or f.primary)

    def identity(self) -> tuple[Any, ...]:
        """Values of the primary-key fields, in declaration order."""
        return tuple(self._fields[i].value for i in self.primary_indices())

    def values(self) -> dict[str, Any]:
        """Return a key/value mapping of the current field values."""
        return {f.key: f.value for f in self._fields}

    def clone(self) -> "EntityRecord":
        """Return an independent copy suitable as an editing draft."""
        return EntityRecord(self._name, [f.copy() for f in self._fields])

    def __repr__(self) -> str:
        return f"EntityRecord({self._name!r}, {list(self._fields)!r})"


def split_words(start: str) -> str:
    """
    Turn an identifier into space separated display words.

    ``sprayerHoseLength`` becomes ``Sprayer Hose Length``, ``SOME_KEY`` becomes
    ``Some Key`` and ``horse_power`` becomes ``Horse Power``.
    """
    if not start:
        return ""

    # All-uppercase identifiers are lowered first.
    if re.fullmatch(r"[A-Z_\d]+", start):
        start = start.lower()

    if re.fullmatch(r"[a-z_\d]+", start):
        start = start[0].upper() + start[1:]
    else:
        words = re.split(r"(?<=[a-z])(?=[A-Z])", start)
        words[0] = words[0][:1].upper() + words[0][1:]
        start = " ".join(words)

    out: list[str] = []
    i = 0
    while i < len(start):
        ch = start[i]
        if ch == "_":
            out.append(" ")
            i += 1
            if i < len(start):
                out.append(start[i].upper())
        else:
            out.append(ch)
        i += 1
    return "".join(out)

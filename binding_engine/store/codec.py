"""
JSON encoding of entity field values.

Encoding rules
--------------
- Text, integers, reals, booleans and primitive lists are stored as-is.
- Enums are stored by member name.
- Date-times are stored as ISO-8601 strings.
- Durations are stored as integer microseconds.
- Binary values are stored as base64 text.
- Objects and entity-list items go through their ``to_json``/``from_json`` pair.

Decoding always starts from a prototype record, which supplies the field kinds
and value types.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime, timedelta
from typing import Any, Mapping

from ..duration import to_microseconds
from ..fields import EntityRecord, FieldDescriptor, FieldKind, Serializable
from .api import Identity
from .errors import EntityCodecError


def _to_json_object(descriptor: FieldDescriptor, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Serializable):
        raise EntityCodecError(
            f"Field {descriptor.key!r} holds {type(value).__name__}, which has no to_json()."
        )
    return value.to_json()


def encode_value(descriptor: FieldDescriptor) -> Any:
    """Return the JSON-compatible form of ``descriptor.value``."""
    value = descriptor.value
    kind = descriptor.kind
    if kind is FieldKind.ENUM:
        return value.name
    if kind is FieldKind.DATETIME:
        return value.isoformat()
    if kind is FieldKind.DURATION:
        return to_microseconds(value)
    if kind is FieldKind.BINARY:
        return base64.b64encode(bytes(value)).decode("ascii")
    if kind is FieldKind.LIST:
        return list(value)
    if kind is FieldKind.ENTITY_LIST:
        return [dict(_to_json_object(descriptor, item)) for item in value]
    if kind is FieldKind.OBJECT:
        return dict(_to_json_object(descriptor, value))
    return value


def decode_value(prototype: FieldDescriptor, raw: Any) -> Any:
    """
    Rebuild a field value from its JSON form.

    Raises
    ------
    EntityCodecError
        If ``raw`` does not fit the prototype's kind.
    """
    kind = prototype.kind
    value_type = prototype.value_type
    try:
        if kind is FieldKind.TEXT:
            return str(raw)
        if kind is FieldKind.INTEGER:
            return int(raw)
        if kind is FieldKind.REAL:
            return float(raw)
        if kind is FieldKind.BOOLEAN:
            return bool(raw)
        if kind is FieldKind.ENUM:
            if value_type is None:
                raise EntityCodecError(f"Field {prototype.key!r} has no enum type.")
            return value_type[raw]  # type: ignore[index]
        if kind is FieldKind.DATETIME:
            return datetime.fromisoformat(raw)
        if kind is FieldKind.DURATION:
            return timedelta(microseconds=int(raw))
        if kind is FieldKind.BINARY:
            return base64.b64decode(raw.encode("ascii"), validate=True)
        if kind is FieldKind.LIST:
            return list(raw)
        if value_type is None or not hasattr(value_type, "from_json"):
            raise EntityCodecError(f"Field {prototype.key!r} has no from_json() value type.")
        if kind is FieldKind.ENTITY_LIST:
            return [value_type.from_json(item) for item in raw]
        return value_type.from_json(raw)
    except EntityCodecError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError, binascii.Error) as exc:
        raise EntityCodecError(f"Cannot decode field {prototype.key!r}: {exc}") from exc


def encode_identity(record: EntityRecord) -> Identity:
    """Return the stable storage identity of ``record``."""
    values = [encode_value(record[i]) for i in record.primary_indices()]
    return json.dumps(values, separators=(",", ":"), ensure_ascii=False)


def encode_payload(record: EntityRecord) -> str:
    """Serialize every field of ``record`` as a JSON object."""
    payload = {f.key: encode_value(f) for f in record}
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def decode_payload(prototype: EntityRecord, payload: Mapping[str, Any]) -> EntityRecord:
    """
    Build a record from a stored payload.

    Fields missing from ``payload`` keep the prototype's value; unknown keys are
    ignored.
    """
    record = prototype.clone()
    for descriptor in record:
        if descriptor.key in payload:
            descriptor.value = decode_value(descriptor, payload[descriptor.key])
    return record

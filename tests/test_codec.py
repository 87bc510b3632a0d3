from __future__ import annotations

import json
from datetime import timedelta

import pytest
from kitchen_sink_model import Color, MountStyle, make_kitchen_sink

from binding_engine.fields import FieldDescriptor, FieldKind
from binding_engine.store.codec import (
    decode_payload,
    decode_value,
    encode_identity,
    encode_payload,
    encode_value,
)
from binding_engine.store.errors import EntityCodecError


def test_payload_encoding_rules() -> None:
    payload = json.loads(encode_payload(make_kitchen_sink()))
    assert payload["mountStyle"] == "CEILING"
    assert payload["installed"] == "2021-06-15T09:30:00"
    assert payload["fillTime"] == 150_000_000
    assert payload["image"] == "iVBORw=="
    assert payload["disposals"] == [{"brand": "Moen", "horsepower": 0.5}]
    assert payload["color"] == {"red": 10, "green": 20, "blue": 30}
    assert list(payload)[0] == "type"


def test_decode_payload_keeps_missing_fields() -> None:
    prototype = make_kitchen_sink("Default")
    record = decode_payload(prototype, {"type": "Loaded", "mountStyle": "WALL", "unknown": 1})
    assert record[0].value == "Loaded"
    assert record.field("mountStyle").value is MountStyle.WALL
    assert record.field("color").value == Color(10, 20, 30)
    assert prototype[0].value == "Default"


def test_identity_is_json_of_primary_values() -> None:
    assert encode_identity(make_kitchen_sink("Main")) == '["Main"]'


def test_duration_sub_microsecond_free() -> None:
    d = FieldDescriptor("t", timedelta(days=1, microseconds=5))
    assert decode_value(d, encode_value(d)) == timedelta(days=1, microseconds=5)


@pytest.mark.parametrize(
    ("descriptor", "raw"),
    [
        (FieldDescriptor("style", MountStyle.WALL), "NOPE"),
        (FieldDescriptor("when", make_kitchen_sink().field("installed").value), "yesterday"),
        (FieldDescriptor("blob", b""), "***"),
        (FieldDescriptor("n", 0), "x"),
        (FieldDescriptor("color", Color(0, 0, 0)), {"red": 1}),
    ],
)
def test_decode_errors_are_codec_errors(descriptor: FieldDescriptor, raw: object) -> None:
    with pytest.raises(EntityCodecError):
        decode_value(descriptor, raw)


def test_object_without_to_json_cannot_be_encoded() -> None:
    d = FieldDescriptor("thing", object(), kind=FieldKind.OBJECT)
    with pytest.raises(EntityCodecError):
        encode_value(d)

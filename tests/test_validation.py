from __future__ import annotations

from datetime import datetime

from kitchen_sink_model import MountStyle, make_kitchen_sink

from binding_engine.fields import EntityRecord, FieldDescriptor
from binding_engine.validation import empty_primary_keys, has_primary_changed, is_valid


def test_empty_identity_is_invalid() -> None:
    assert is_valid(make_kitchen_sink())
    assert not is_valid(make_kitchen_sink(""))


def test_empty_flagged_primary_text_is_invalid() -> None:
    record = EntityRecord(
        "Pair",
        [FieldDescriptor("type", "Main"), FieldDescriptor("site", "", primary=True)],
    )
    assert not is_valid(record)


def test_empty_non_primary_text_is_valid() -> None:
    record = EntityRecord("Pair", [FieldDescriptor("type", "Main"), FieldDescriptor("note", "")])
    assert is_valid(record)


def test_non_text_identity_is_always_valid() -> None:
    record = EntityRecord(
        "Reading",
        [
            FieldDescriptor("taken", datetime(2020, 1, 1)),
            FieldDescriptor("count", 0, primary=True),
            FieldDescriptor("style", MountStyle.WALL, primary=True),
        ],
    )
    assert is_valid(record)


def test_has_primary_changed() -> None:
    original = make_kitchen_sink()
    draft = original.clone()
    assert not has_primary_changed(None, draft)
    assert not has_primary_changed(original, draft)

    draft.field("bays").value = 9
    assert not has_primary_changed(original, draft)

    draft[0].value = "Secondary"
    assert has_primary_changed(original, draft)


def test_empty_primary_keys_names_the_blank_field() -> None:
    record = EntityRecord(
        "Pair",
        [FieldDescriptor("type", "Main"), FieldDescriptor("site", "", primary=True)],
    )
    assert empty_primary_keys(record) == ["site"]
    assert empty_primary_keys(make_kitchen_sink()) == []
    assert empty_primary_keys(make_kitchen_sink("")) == ["type"]

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from kitchen_sink_model import KIND_NAME, make_kitchen_sink

from binding_engine.persistence import SaveStatus, save
from binding_engine.store.codec import encode_identity
from binding_engine.store.errors import DuplicateEntityError, UnknownEntityError
from binding_engine.store.sqlite_store import (
    SqliteEntityStorage,
    delete_stored_entity,
    open_entity_storage,
    read_stored_entities,
)


def _storage(tmp_path: Path) -> SqliteEntityStorage:
    return SqliteEntityStorage(db_path=tmp_path / "db" / "entities.sqlite", factory=make_kitchen_sink)


def test_create_and_get_roundtrip(tmp_path: Path) -> None:
    """A created record should load back with equal values."""
    storage = _storage(tmp_path)
    record = make_kitchen_sink("Main")

    asyncio.run(storage.create(record))
    loaded = asyncio.run(storage.get(encode_identity(record)))

    assert loaded.values() == record.values()
    assert storage.kind == KIND_NAME


def test_create_duplicate_raises(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    asyncio.run(storage.create(make_kitchen_sink("Main")))
    with pytest.raises(DuplicateEntityError):
        asyncio.run(storage.create(make_kitchen_sink("Main")))


def test_update_and_delete_unknown_raise(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    with pytest.raises(UnknownEntityError):
        asyncio.run(storage.update(make_kitchen_sink("Ghost")))
    with pytest.raises(UnknownEntityError):
        asyncio.run(storage.delete(make_kitchen_sink("Ghost")))


def test_rename_through_save(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    original = make_kitchen_sink("Main")
    asyncio.run(storage.create(original))

    draft = original.clone()
    draft[0].value = "Secondary"
    draft.field("bays").value = 8
    assert asyncio.run(save(storage, original, draft)) is SaveStatus.UPDATED

    stored = asyncio.run(storage.list_all())
    assert [r[0].value for r in stored] == ["Secondary"]
    assert stored[0].field("bays").value == 8


def test_list_all_is_ordered_by_identity(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    for name in ("b", "c", "a"):
        asyncio.run(storage.create(make_kitchen_sink(name)))
    assert [r[0].value for r in asyncio.run(storage.list_all())] == ["a", "b", "c"]


def test_kinds_are_isolated(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    asyncio.run(storage.create(make_kitchen_sink("Main")))
    assert read_stored_entities(storage.db_path, "Other") == []
    assert len(read_stored_entities(storage.db_path, KIND_NAME)) == 1


def test_delete_stored_entity(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    record = make_kitchen_sink("Main")
    asyncio.run(storage.create(record))

    delete_stored_entity(storage.db_path, KIND_NAME, encode_identity(record))

    assert read_stored_entities(storage.db_path, KIND_NAME) == []
    with pytest.raises(UnknownEntityError):
        delete_stored_entity(storage.db_path, KIND_NAME, encode_identity(record))


def test_open_entity_storage_uses_data_root(tmp_path: Path) -> None:
    storage = open_entity_storage(make_kitchen_sink, data_root=tmp_path)
    assert storage.db_path == tmp_path / "entities.sqlite"
    assert storage.db_path.exists()

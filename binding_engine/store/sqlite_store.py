"""
SQLite implementation of EntityStorage.

This module owns the on-disk persistence format for entity records.

Threading
---------
sqlite3 connections are not shared across threads. Each storage call opens its
own connection inside the worker thread started by ``asyncio.to_thread``, so the
coroutines may be awaited from any event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ..fields import EntityRecord
from ..paths import default_database_path
from .api import EntityStorage, Identity, StoredEntity
from .codec import decode_payload, encode_identity, encode_payload
from .errors import DuplicateEntityError, EntityCodecError, UnknownEntityError
from .schema import SCHEMA_V1

logger = logging.getLogger(__name__)

RecordFactory = Callable[[], EntityRecord]


def _connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def initialize_database(db_path: Path) -> None:
    """Create the database file and schema if absent."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with _connect(db_path) as conn:
        conn.executescript(SCHEMA_V1)


def read_stored_entities(db_path: Path, kind: str) -> list[StoredEntity]:
    """
    Return every stored row of ``kind``, ordered by identity.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.
    kind:
        Entity type name.

    Raises
    ------
    EntityCodecError
        If a stored payload is not a JSON object.
    """
    initialize_database(db_path)
    with _connect(db_path) as conn:
        rows = conn.execute(
            "SELECT identity, payload FROM entities WHERE kind = ? ORDER BY identity ASC",
            (kind,),
        ).fetchall()

    out: list[StoredEntity] = []
    for r in rows:
        try:
            payload = json.loads(r["payload"])
        except json.JSONDecodeError as exc:
            raise EntityCodecError(f"Stored payload for {r['identity']} is not JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise EntityCodecError(f"Stored payload for {r['identity']} is not a JSON object.")
        out.append(StoredEntity(kind=kind, identity=str(r["identity"]), payload=payload))
    return out


def delete_stored_entity(db_path: Path, kind: str, identity: Identity) -> None:
    """
    Delete one stored row.

    Raises
    ------
    UnknownEntityError
        If no row matches ``kind`` and ``identity``.
    """
    initialize_database(db_path)
    with _connect(db_path) as conn:
        cur = conn.execute(
            "DELETE FROM entities WHERE kind = ? AND identity = ?",
            (kind, identity),
        )
        if cur.rowcount == 0:
            raise UnknownEntityError(f"Unknown {kind} identity: {identity}")


@dataclass(frozen=True, slots=True)
class SqliteEntityStorage(EntityStorage):
    """
    SQLite-backed storage for one entity kind.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.
    factory:
        Builds a default record of the stored kind. Used as the decoding
        prototype and to name the kind.

    Notes
    -----
    The database file is created if absent. The parent directory is created as
    needed.
    """

    db_path: Path
    factory: RecordFactory
    kind: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", self.factory().name)
        initialize_database(self.db_path)

    def _create(self, record: EntityRecord) -> None:
        identity = encode_identity(record)
        with _connect(self.db_path) as conn:
            try:
                conn.execute(
                    "INSERT INTO entities(kind, identity, payload) VALUES(?, ?, ?)",
                    (self.kind, identity, encode_payload(record)),
                )
            except sqlite3.IntegrityError:
                raise DuplicateEntityError(f"{self.kind} {identity} already exists.") from None
        logger.debug("Inserted %s %s", self.kind, identity)

    def _update(self, record: EntityRecord) -> None:
        identity = encode_identity(record)
        with _connect(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE entities SET payload = ? WHERE kind = ? AND identity = ?",
                (encode_payload(record), self.kind, identity),
            )
            if cur.rowcount == 0:
                raise UnknownEntityError(f"Unknown {self.kind} identity: {identity}")
        logger.debug("Updated %s %s", self.kind, identity)

    def _delete(self, record: EntityRecord) -> None:
        identity = encode_identity(record)
        delete_stored_entity(self.db_path, self.kind, identity)
        logger.debug("Deleted %s %s", self.kind, identity)

    def _get(self, identity: Identity) -> EntityRecord:
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT payload FROM entities WHERE kind = ? AND identity = ?",
                (self.kind, identity),
            ).fetchone()
        if row is None:
            raise UnknownEntityError(f"Unknown {self.kind} identity: {identity}")
        return decode_payload(self.factory(), json.loads(row["payload"]))

    def _list_all(self) -> list[EntityRecord]:
        prototype = self.factory()
        return [
            decode_payload(prototype, stored.payload)
            for stored in read_stored_entities(self.db_path, self.kind)
        ]

    async def create(self, record: EntityRecord) -> None:
        """See EntityStorage.create."""
        await asyncio.to_thread(self._create, record)

    async def update(self, record: EntityRecord) -> None:
        """See EntityStorage.update."""
        await asyncio.to_thread(self._update, record)

    async def delete(self, record: EntityRecord) -> None:
        """See EntityStorage.delete."""
        await asyncio.to_thread(self._delete, record)

    async def get(self, identity: Identity) -> EntityRecord:
        """
        Load one stored record.

        Parameters
        ----------
        identity:
            Identity as produced by ``codec.encode_identity``.

        Raises
        ------
        UnknownEntityError
            If the identity is not stored.
        """
        return await asyncio.to_thread(self._get, identity)

    async def list_all(self) -> list[EntityRecord]:
        """Return every stored record of this kind, ordered by identity."""
        return await asyncio.to_thread(self._list_all)


def open_entity_storage(factory: RecordFactory, data_root: Path | None = None) -> SqliteEntityStorage:
    """
    Convenience constructor using the default database location.

    Parameters
    ----------
    factory:
        Default-record factory of the stored kind.
    data_root:
        Optional override for the data root.

    Returns
    -------
    SqliteEntityStorage
        Ready-to-use SQLite-backed storage.
    """
    return SqliteEntityStorage(db_path=default_database_path(data_root), factory=factory)

"""
Entity storage public API.

This module defines the persistence surface the save path is allowed to call.
The binding engine never depends on SQLite details; it speaks only in entity
records.

Notes
-----
- Every call may suspend. Callers await them one at a time.
- Failures propagate to the caller; implementations do not retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from ..fields import EntityRecord

Identity = str


@dataclass(frozen=True, slots=True)
class StoredEntity:
    """
    Raw stored row, readable without an entity prototype.

    Attributes
    ----------
    kind:
        Entity type name.
    identity:
        JSON encoding of the primary-key values.
    payload:
        Encoded field values keyed by field name.
    """

    kind: str
    identity: Identity
    payload: Mapping[str, Any]


class EntityStorage(Protocol):
    """Persistence API used by ``persistence.save``."""

    async def create(self, record: EntityRecord) -> None:
        """
        Store a new entity.

        Raises
        ------
        DuplicateEntityError
            If the record's identity is already stored (implementation-defined).
        """
        raise NotImplementedError

    async def update(self, record: EntityRecord) -> None:
        """
        Overwrite the stored entity with the same identity.

        Raises
        ------
        UnknownEntityError
            If the identity is not stored (implementation-defined).
        """
        raise NotImplementedError

    async def delete(self, record: EntityRecord) -> None:
        """
        Remove the stored entity with the record's identity.

        Raises
        ------
        UnknownEntityError
            If the identity is not stored (implementation-defined).
        """
        raise NotImplementedError

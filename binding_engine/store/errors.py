"""Domain exceptions for entity storage."""

from __future__ import annotations


class EntityStoreError(RuntimeError):
    """Base error for entity storage operations."""


class UnknownEntityError(EntityStoreError):
    """Raised when an identity is not present in the store."""


class DuplicateEntityError(EntityStoreError):
    """Raised when creating an identity that is already stored."""


class EntityCodecError(EntityStoreError):
    """Raised when a field value cannot be encoded or decoded."""

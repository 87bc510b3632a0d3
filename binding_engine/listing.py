"""
Entity list presentation.

A list screen shows every stored entity of one kind as a titled entry, sorted by
title, and opens an editor for the entry the user picks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from .fields import EntityRecord


def default_title(record: EntityRecord) -> str:
    """Title an entity by its identity field."""
    return str(record[0].value)


@dataclass(frozen=True, slots=True)
class ListEntry:
    """One displayed entity."""

    title: str
    subtitle: str | None
    record: EntityRecord


@dataclass(frozen=True, slots=True)
class EntityListing:
    """
    Formats and orders entities for a list screen.

    Attributes
    ----------
    title:
        Entry title formatter.
    subtitle:
        Optional entry subtitle formatter.
    """

    title: Callable[[EntityRecord], str] = default_title
    subtitle: Callable[[EntityRecord], str | None] | None = None

    def entries(self, records: Iterable[EntityRecord]) -> list[ListEntry]:
        """Return one entry per record, sorted by title."""
        out = [
            ListEntry(
                title=self.title(r),
                subtitle=self.subtitle(r) if self.subtitle is not None else None,
                record=r,
            )
            for r in records
        ]
        out.sort(key=lambda e: e.title)
        return out

"""SQLite schema for entity storage.

Notes
-----
One table holds every entity kind. Field values live in a JSON payload so the
schema does not change when an entity declares new fields.
"""

from __future__ import annotations

SCHEMA_V1 = """
PRAGMA journal_mode = WAL;

CREATE TABLE IF NOT EXISTS entities (
    kind     TEXT NOT NULL,
    identity TEXT NOT NULL,
    payload  TEXT NOT NULL,
    PRIMARY KEY (kind, identity)
);

CREATE INDEX IF NOT EXISTS idx_entities_kind ON entities(kind);
"""

"""Storage fake for save-path tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from binding_engine.fields import EntityRecord


@dataclass
class RecordingStorage:
    """
    Storage fake that records every call in order.

    ``fail_on`` names an operation ("create", "update" or "delete") that raises
    after being recorded.
    """

    calls: list[tuple[str, EntityRecord]] = field(default_factory=list)
    fail_on: str | None = None

    async def _record(self, op: str, record: EntityRecord) -> None:
        self.calls.append((op, record))
        if op == self.fail_on:
            raise RuntimeError(f"{op} failed")

    async def create(self, record: EntityRecord) -> None:
        await self._record("create", record)

    async def update(self, record: EntityRecord) -> None:
        await self._record("update", record)

    async def delete(self, record: EntityRecord) -> None:
        await self._record("delete", record)

    def ops(self) -> list[str]:
        return [op for op, _record in self.calls]

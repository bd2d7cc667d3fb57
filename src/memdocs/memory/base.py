"""Protocols for the collaborators the docs memory commands consume."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from memdocs.memory.types import MemoryItem, RedactionResult, SearchHit


@runtime_checkable
class MemoryStore(Protocol):
    """Persisted item store. Ordering and scoring belong to the store."""

    async def add(self, item: MemoryItem) -> None: ...

    async def get(self, id: str) -> MemoryItem | None: ...

    async def delete(self, id: str) -> bool:
        """Delete by id. Returns False when no such item exists."""
        ...

    async def list(
        self, *, limit: int | None = None, tags: list[str] | None = None
    ) -> list[MemoryItem]: ...

    async def search(
        self, query: str, *, limit: int, tags: list[str] | None = None
    ) -> list[SearchHit]:
        """Return hits ordered by descending score."""
        ...


@runtime_checkable
class Redactor(Protocol):
    """Secret redaction engine. May be sync or return an awaitable."""

    def redact(self, text: str) -> RedactionResult | Awaitable[RedactionResult]: ...

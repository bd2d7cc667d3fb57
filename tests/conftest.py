"""Shared doubles for the docs memory tests."""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from memdocs.config import DocsMemoryConfig
from memdocs.core import DocsMemory
from memdocs.memory.types import MemoryItem, RedactionResult

_OPENAI_KEY = re.compile(r"sk-proj-[A-Za-z0-9]{20,}")


class MockStore:
    """Store double; every method is an AsyncMock with an empty default."""

    def __init__(self) -> None:
        self.add = AsyncMock(return_value=None)
        self.get = AsyncMock(return_value=None)
        self.delete = AsyncMock(return_value=False)
        self.list = AsyncMock(return_value=[])
        self.search = AsyncMock(return_value=[])


class FakeRedactor:
    def redact(self, text: str) -> RedactionResult:
        matches = [{"rule": "OPENAI_KEY", "match": m} for m in _OPENAI_KEY.findall(text)]
        return RedactionResult(
            redacted_text=_OPENAI_KEY.sub("[REDACTED:OPENAI_KEY]", text),
            had_secrets=bool(matches),
            matches=matches,
        )


def make_item(
    id: str = "abcdef12-3456-7890-abcd-ef1234567890",
    text: str = "A doc",
    created_at: str = "2026-01-15T00:00:00.000Z",
    tags: list[str] | None = None,
    project: str | None = None,
) -> MemoryItem:
    return MemoryItem(
        id=id,
        kind="doc",
        text=text,
        created_at=created_at,
        tags=tags,
        meta={"project": project} if project else None,
    )


@pytest.fixture
def store() -> MockStore:
    return MockStore()


@pytest.fixture
def config(tmp_path: Path) -> DocsMemoryConfig:
    return DocsMemoryConfig(
        store_path=str(tmp_path / "docs-memory.jsonl"),
        export_path=str(tmp_path / "export"),
    )


@pytest.fixture
def docs(config: DocsMemoryConfig, store: MockStore) -> DocsMemory:
    return DocsMemory(config, store, FakeRedactor())

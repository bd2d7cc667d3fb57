"""Tests for the docs memory command handlers."""

from __future__ import annotations

import pytest

from memdocs.config import DocsMemoryConfig
from memdocs.core import CommandContext, DocsMemory
from memdocs.memory.types import MemorySource, RedactionResult, SearchHit

from conftest import FakeRedactor, MockStore, make_item


def saved_item(store: MockStore):
    store.add.assert_awaited_once()
    return store.add.await_args.args[0]


class TestRemember:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", ["", "   ", "--tags api", "--project AEGIS"])
    async def test_usage_when_no_text(self, docs: DocsMemory, store: MockStore, args: str):
        result = await docs.remember(CommandContext(args=args))
        assert result.text.startswith("Usage: /remember-doc")
        store.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_saves_item(self, docs: DocsMemory, store: MockStore):
        result = await docs.remember(CommandContext(args="test doc note"))
        assert result.text == "Saved docs memory."
        item = saved_item(store)
        assert item.kind == "doc"
        assert item.text == "test doc note"
        assert item.tags == ["docs"]
        assert item.meta is None
        assert item.source is None
        assert item.created_at.endswith("Z")

    @pytest.mark.asyncio
    async def test_injected_id_and_clock(self, config: DocsMemoryConfig, store: MockStore):
        docs = DocsMemory(
            config, store, FakeRedactor(), id_factory=lambda: "id-1", clock=lambda: "2026-03-01T00:00:00.000Z"
        )
        await docs.remember(CommandContext(args="note"))
        item = saved_item(store)
        assert item.id == "id-1"
        assert item.created_at == "2026-03-01T00:00:00.000Z"

    @pytest.mark.asyncio
    async def test_merges_tags_after_defaults(self, docs: DocsMemory, store: MockStore):
        result = await docs.remember(CommandContext(args="--tags x,y note"))
        assert saved_item(store).tags == ["docs", "x", "y"]
        assert "Tags: x, y." in result.text

    @pytest.mark.asyncio
    async def test_default_tag_not_duplicated(self, docs: DocsMemory, store: MockStore):
        await docs.remember(CommandContext(args="--tags docs,x note"))
        assert saved_item(store).tags == ["docs", "x"]

    @pytest.mark.asyncio
    async def test_project_goes_to_meta(self, docs: DocsMemory, store: MockStore):
        result = await docs.remember(CommandContext(args="--project AEGIS API auth design notes"))
        item = saved_item(store)
        assert item.text == "API auth design notes"
        assert item.tags == ["docs"]
        assert item.meta == {"project": "AEGIS"}
        assert "Project: AEGIS." in result.text

    @pytest.mark.asyncio
    async def test_redacts_secrets(self, docs: DocsMemory, store: MockStore):
        result = await docs.remember(
            CommandContext(args="my key is sk-proj-ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmn")
        )
        assert "secrets were redacted" in result.text
        item = saved_item(store)
        assert "sk-proj-" not in item.text
        assert "[REDACTED:OPENAI_KEY]" in item.text
        assert item.meta["redaction"]["hadSecrets"] is True
        assert len(item.meta["redaction"]["matches"]) == 1
        assert "project" not in item.meta

    @pytest.mark.asyncio
    async def test_redaction_disabled(self, config: DocsMemoryConfig, store: MockStore):
        config.redact_secrets = False
        docs = DocsMemory(config, store, FakeRedactor())
        secret = "key sk-proj-ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmn"
        result = await docs.remember(CommandContext(args=secret))
        assert "redacted" not in result.text
        item = saved_item(store)
        assert item.text == secret
        assert item.meta is None

    @pytest.mark.asyncio
    async def test_async_redactor(self, config: DocsMemoryConfig, store: MockStore):
        class AsyncRedactor:
            async def redact(self, text: str) -> RedactionResult:
                return RedactionResult(redacted_text="[scrubbed]", had_secrets=True, matches=["x"])

        docs = DocsMemory(config, store, AsyncRedactor())
        await docs.remember(CommandContext(args="anything"))
        assert saved_item(store).text == "[scrubbed]"

    @pytest.mark.asyncio
    async def test_preserves_source_context(self, docs: DocsMemory, store: MockStore):
        ctx = CommandContext(
            args="preserve context test",
            channel="general",
            sender="user-1",
            conversation_id="conv-42",
            message_id="msg-99",
        )
        await docs.remember(ctx)
        assert saved_item(store).source == MemorySource(
            channel="general", sender="user-1", conversation_id="conv-42", message_id="msg-99"
        )


class TestSearch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", ["", "--tags api", "--project AEGIS"])
    async def test_usage_when_no_query(self, docs: DocsMemory, store: MockStore, args: str):
        result = await docs.search(CommandContext(args=args))
        assert result.text.startswith("Usage: /search-docs")
        store.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_results(self, docs: DocsMemory):
        result = await docs.search(CommandContext(args="test query"))
        assert result.text == "No docs memories found for: test query"

    @pytest.mark.asyncio
    async def test_formats_results(self, docs: DocsMemory, store: MockStore):
        store.search.return_value = [
            SearchHit(item=make_item(id="abc123", text="First matching doc about residency"), score=0.85),
            SearchHit(item=make_item(id="def456", text="Second doc about banking"), score=0.62),
        ]
        result = await docs.search(CommandContext(args="residency"))
        lines = result.text.splitlines()
        assert lines[0] == 'Docs memory results for "residency":'
        assert lines[1] == "1. [id:abc123] (0.85) First matching doc about residency"
        assert lines[2] == "2. [id:def456] (0.62) Second doc about banking"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args,query,limit",
        [
            ("residency 3", "residency", 3),
            ("banking setup", "banking setup", 5),
            ("policy 99", "policy", 20),
            ("policy 0", "policy 0", 5),
            ("2024", "2024", 5),
            ("policy 2024", "policy", 20),
        ],
    )
    async def test_trailing_limit(self, docs: DocsMemory, store: MockStore, args, query, limit):
        await docs.search(CommandContext(args=args))
        store.search.assert_awaited_once_with(query, limit=limit)

    @pytest.mark.asyncio
    async def test_tags_passed_to_store(self, docs: DocsMemory, store: MockStore):
        await docs.search(CommandContext(args="--tags api,auth tokens 3"))
        store.search.assert_awaited_once_with("tokens", limit=3, tags=["api", "auth"])

    @pytest.mark.asyncio
    async def test_project_filtered_in_memory(self, docs: DocsMemory, store: MockStore):
        store.search.return_value = [
            SearchHit(item=make_item(id="aegis-1", text="AEGIS design", project="AEGIS"), score=0.9),
            SearchHit(item=make_item(id="other-1", text="OTHER design", project="OTHER"), score=0.8),
            SearchHit(item=make_item(id="plain-1", text="Plain design"), score=0.7),
        ]
        result = await docs.search(CommandContext(args="--project AEGIS design"))
        store.search.assert_awaited_once_with("design", limit=5)
        assert "[project:AEGIS]" in result.text
        assert "OTHER design" not in result.text
        assert "Plain design" not in result.text

    @pytest.mark.asyncio
    async def test_project_filter_can_empty_results(self, docs: DocsMemory, store: MockStore):
        store.search.return_value = [SearchHit(item=make_item(project="OTHER"), score=0.9)]
        result = await docs.search(CommandContext(args="--project AEGIS design"))
        assert result.text == "No docs memories found for: design"

    @pytest.mark.asyncio
    async def test_truncates_long_text(self, docs: DocsMemory, store: MockStore):
        store.search.return_value = [SearchHit(item=make_item(text="A" * 200), score=0.9)]
        result = await docs.search(CommandContext(args="test"))
        assert "A" * 121 not in result.text
        assert "A" * 120 + "…" in result.text

    @pytest.mark.asyncio
    async def test_extra_tags_badge(self, docs: DocsMemory, store: MockStore):
        store.search.return_value = [SearchHit(item=make_item(tags=["docs", "api"]), score=0.5)]
        result = await docs.search(CommandContext(args="test"))
        assert "[tags:api]" in result.text


class TestList:
    @pytest.mark.asyncio
    async def test_empty(self, docs: DocsMemory):
        result = await docs.list(CommandContext(args=""))
        assert result.text == "No docs memories stored yet."

    @pytest.mark.asyncio
    async def test_lists_items_with_ids(self, docs: DocsMemory, store: MockStore):
        store.list.return_value = [
            make_item(id="abcdef12-3456-7890-abcd-ef1234567890", text="First doc item"),
            make_item(
                id="deadbeef-cafe-1234-5678-abcdef012345",
                text="Second doc item",
                created_at="2026-01-16T00:00:00Z",
            ),
        ]
        result = await docs.list(CommandContext(args=""))
        lines = result.text.splitlines()
        assert lines[0] == "Docs memories (2):"
        assert lines[1] == "1. [id:abcdef12] 2026-01-15 First doc item"
        assert lines[2] == "2. [id:deadbeef] 2026-01-16 Second doc item"
        assert "Full IDs (for /forget-doc):" in lines
        assert lines[-2:] == [
            "- abcdef12-3456-7890-abcd-ef1234567890",
            "- deadbeef-cafe-1234-5678-abcdef012345",
        ]

    @pytest.mark.asyncio
    async def test_short_identifier(self, docs: DocsMemory, store: MockStore):
        store.list.return_value = [make_item(id="short", text="Short id item")]
        result = await docs.list(CommandContext(args=""))
        assert "[id:short]" in result.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args,limit", [("", 10), ("5", 5), ("999", 50), ("abc", 10), ("0", 10)]
    )
    async def test_limit(self, docs: DocsMemory, store: MockStore, args, limit):
        await docs.list(CommandContext(args=args))
        store.list.assert_awaited_once_with(limit=limit)

    @pytest.mark.asyncio
    async def test_tags_and_project(self, docs: DocsMemory, store: MockStore):
        store.list.return_value = [
            make_item(id="aegis-1", text="Keep me", tags=["docs", "api"], project="AEGIS"),
            make_item(id="other-1", text="Drop me", tags=["docs", "api"], project="OTHER"),
        ]
        result = await docs.list(CommandContext(args="--tags api --project AEGIS 20"))
        store.list.assert_awaited_once_with(limit=20, tags=["api"])
        assert "Keep me [tags:api]" not in result.text
        assert "[tags:api] [project:AEGIS] Keep me" in result.text
        assert "Drop me" not in result.text
        assert "other-1" not in result.text


class TestForget:
    @pytest.mark.asyncio
    async def test_usage(self, docs: DocsMemory, store: MockStore):
        result = await docs.forget(CommandContext(args="  "))
        assert result.text == "Usage: /forget-doc <id>"
        store.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deletes(self, docs: DocsMemory, store: MockStore):
        store.delete.return_value = True
        result = await docs.forget(CommandContext(args=" abc123 "))
        assert result.text == "Deleted docs memory: abc123"
        store.delete.assert_awaited_once_with("abc123")

    @pytest.mark.asyncio
    async def test_not_found(self, docs: DocsMemory, store: MockStore):
        result = await docs.forget(CommandContext(args="ghost-id"))
        assert result.text == "No memory found with id: ghost-id"

"""Docs memory orchestrator: one coroutine per user-facing command.

Responsibilities:
1. Parse --tags/--project flags out of raw command args
2. Capture — redact, merge default tags, persist a new item
3. Search/List — store-side tag filter, in-memory project filter
4. Forget — delete by id
5. Export/Import — round-trip items through markdown files

Holds no state between invocations beyond what the store persists.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from memdocs.config import DEFAULT_EXPORT_DIR, DocsMemoryConfig
from memdocs.formatting import extra_tags, format_list_line, format_search_line
from memdocs.memory.codec import MARKDOWN_SUFFIX, decode_markdown, encode_markdown, export_filename
from memdocs.memory.flags import parse_flags
from memdocs.memory.types import MemoryItem, MemorySource, RedactionResult, SearchHit
from memdocs.safety import UnsafePathError, assert_safe_path, expand_home, safe_limit

if TYPE_CHECKING:
    from memdocs.memory.base import MemoryStore, Redactor

logger = logging.getLogger(__name__)

SEARCH_DEFAULT_LIMIT = 5
SEARCH_MAX_LIMIT = 20
LIST_DEFAULT_LIMIT = 10
LIST_MAX_LIMIT = 50

USAGE = {
    "remember-doc": "Usage: /remember-doc [--tags t1,t2] [--project name] <text>",
    "search-docs": "Usage: /search-docs [--tags t1,t2] [--project name] <query> [limit]",
    "forget-doc": "Usage: /forget-doc <id>",
}


@dataclass
class CommandContext:
    """A single command invocation from the host."""

    args: str = ""
    channel: str | None = None
    sender: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None

    @property
    def source(self) -> MemorySource | None:
        source = MemorySource(
            channel=self.channel,
            sender=self.sender,
            conversation_id=self.conversation_id,
            message_id=self.message_id,
        )
        return None if source.is_empty() else source


@dataclass
class CommandResult:
    """Reply text for the host to show the user."""

    text: str


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return str(uuid.uuid4())


def _is_limit_token(token: str) -> bool:
    try:
        return float(token) >= 1
    except ValueError:
        return False


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class DocsMemory:
    """Command handlers bound to a config, a store and a redactor."""

    def __init__(
        self,
        config: DocsMemoryConfig,
        store: MemoryStore,
        redactor: Redactor | None = None,
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], str] = _now_iso,
    ) -> None:
        self.config = config
        self.store = store
        self.redactor = redactor
        self._id_factory = id_factory
        self._clock = clock
        if config.redact_secrets and redactor is None:
            logger.warning("redact_secrets is on but no redactor was given; notes are stored as-is")

    # ── Shared helpers ───────────────────────────────────────

    @property
    def default_tags(self) -> list[str]:
        return list(self.config.default_tags)

    def _merge_tags(self, tags: list[str]) -> list[str]:
        merged = self.default_tags
        for tag in tags:
            if tag not in merged:
                merged.append(tag)
        return merged

    async def _redact(self, text: str) -> RedactionResult:
        if not self.config.redact_secrets or self.redactor is None:
            return RedactionResult(redacted_text=text)
        result = self.redactor.redact(text)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def _tag_filter(tags: list[str]) -> dict[str, Any]:
        # The store only sees a tags key when the user asked for one.
        return {"tags": tags} if tags else {}

    @staticmethod
    def _filter_project(items: list[MemoryItem], project: str | None) -> list[MemoryItem]:
        if project is None:
            return items
        return [item for item in items if item.project == project]

    def _resolve_dir(self, path: str, label: str) -> Path:
        raw = path or self.config.export_path or DEFAULT_EXPORT_DIR
        return assert_safe_path(expand_home(raw), label)

    async def search_hits(
        self,
        query: str,
        limit: int,
        tags: list[str] | None = None,
        project: str | None = None,
    ) -> list[SearchHit]:
        """Store search plus the in-memory project filter."""
        hits = await self.store.search(query, limit=limit, **self._tag_filter(tags or []))
        if project is None:
            return hits
        return [hit for hit in hits if hit.item.project == project]

    # ── /remember-doc ────────────────────────────────────────

    async def remember(self, ctx: CommandContext) -> CommandResult:
        flags = parse_flags(ctx.args)
        if not flags.text:
            return CommandResult(USAGE["remember-doc"])

        r = await self._redact(flags.text)
        if not r.redacted_text.strip():
            return CommandResult(USAGE["remember-doc"])

        tags = self._merge_tags(flags.tags)
        meta: dict[str, Any] = {}
        if flags.project:
            meta["project"] = flags.project
        if r.had_secrets:
            meta["redaction"] = {"hadSecrets": True, "matches": r.matches}

        item = MemoryItem(
            id=self._id_factory(),
            kind="doc",
            text=r.redacted_text,
            created_at=self._clock(),
            tags=tags,
            source=ctx.source,
            meta=meta or None,
        )
        await self.store.add(item)
        logger.info("Saved docs memory %s (%d chars)", item.id, len(item.text))

        parts = ["Saved docs memory."]
        added = extra_tags(tags, self.default_tags)
        if added:
            parts.append(f"Tags: {', '.join(added)}.")
        if flags.project:
            parts.append(f"Project: {flags.project}.")
        text = " ".join(parts)
        if r.had_secrets:
            text += " (note: secrets were redacted)"
        return CommandResult(text)

    # ── /search-docs ─────────────────────────────────────────

    async def search(self, ctx: CommandContext) -> CommandResult:
        flags = parse_flags(ctx.args)
        tokens = flags.text.split()
        limit = SEARCH_DEFAULT_LIMIT
        # "policy 2024" with a single token stays a query.
        if len(tokens) > 1 and _is_limit_token(tokens[-1]):
            limit = safe_limit(tokens[-1], SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT)
            tokens = tokens[:-1]
        query = " ".join(tokens)
        if not query:
            return CommandResult(USAGE["search-docs"])

        hits = await self.search_hits(query, limit, flags.tags, flags.project)
        if not hits:
            return CommandResult(f"No docs memories found for: {query}")

        lines = [f'Docs memory results for "{query}":']
        lines.extend(
            format_search_line(i, hit, self.default_tags) for i, hit in enumerate(hits, start=1)
        )
        return CommandResult("\n".join(lines))

    # ── /list-docs ───────────────────────────────────────────

    async def list(self, ctx: CommandContext) -> CommandResult:
        flags = parse_flags(ctx.args)
        limit = safe_limit(flags.text or None, LIST_DEFAULT_LIMIT, LIST_MAX_LIMIT)

        items = await self.store.list(limit=limit, **self._tag_filter(flags.tags))
        items = self._filter_project(items, flags.project)
        if not items:
            return CommandResult("No docs memories stored yet.")

        lines = [f"Docs memories ({len(items)}):"]
        lines.extend(
            format_list_line(i, item, self.default_tags) for i, item in enumerate(items, start=1)
        )
        lines.append("")
        lines.append("Full IDs (for /forget-doc):")
        lines.extend(f"- {item.id}" for item in items)
        return CommandResult("\n".join(lines))

    # ── /forget-doc ──────────────────────────────────────────

    async def forget(self, ctx: CommandContext) -> CommandResult:
        id = ctx.args.strip()
        if not id:
            return CommandResult(USAGE["forget-doc"])

        if await self.store.delete(id):
            logger.info("Deleted docs memory %s", id)
            return CommandResult(f"Deleted docs memory: {id}")
        return CommandResult(f"No memory found with id: {id}")

    # ── /export-docs ─────────────────────────────────────────

    async def export(self, ctx: CommandContext) -> CommandResult:
        flags = parse_flags(ctx.args)
        try:
            target = self._resolve_dir(flags.text, "export")
        except UnsafePathError as e:
            return CommandResult(f"Invalid export path: {e}")

        items = await self.store.list(**self._tag_filter(flags.tags))
        items = self._filter_project(items, flags.project)
        if not items:
            return CommandResult("Nothing to export.")

        try:
            target.mkdir(parents=True, exist_ok=True)
            for item in items:
                (target / export_filename(item)).write_text(encode_markdown(item), encoding="utf-8")
        except OSError as e:
            logger.warning("Export to %s failed: %s", target, e)
            return CommandResult(f"Export failed: {e}")

        logger.info("Exported %d docs memories to %s", len(items), target)
        return CommandResult(f"Exported {_plural(len(items), 'memory item')} to {target}")

    # ── /import-docs ─────────────────────────────────────────

    async def import_docs(self, ctx: CommandContext) -> CommandResult:
        try:
            source = self._resolve_dir(ctx.args.strip(), "import")
        except UnsafePathError as e:
            return CommandResult(f"Invalid import path: {e}")

        try:
            files = sorted(
                (p for p in source.iterdir() if p.name.endswith(MARKDOWN_SUFFIX) and p.is_file()),
                key=lambda p: p.name,
            )
        except FileNotFoundError:
            return CommandResult(f"Import directory not found: {source}")
        except OSError as e:
            logger.warning("Cannot list import directory %s: %s", source, e)
            return CommandResult(f"Import failed: {e}")

        imported = invalid = duplicate = 0
        try:
            for path in files:
                try:
                    item = decode_markdown(path.read_text(encoding="utf-8"))
                except UnicodeDecodeError:
                    item = None
                if item is None:
                    logger.debug("Skipping invalid docs memory file: %s", path)
                    invalid += 1
                    continue
                if await self.store.get(item.id) is not None:
                    logger.debug("Skipping %s: id %s already stored", path.name, item.id)
                    duplicate += 1
                    continue
                await self.store.add(item)
                imported += 1
        except OSError as e:
            logger.warning("Import from %s stopped after %d items: %s", source, imported, e)
            return CommandResult(f"Import failed: {e}")

        logger.info(
            "Imported %d docs memories from %s (%d invalid, %d duplicate)",
            imported,
            source,
            invalid,
            duplicate,
        )
        text = f"Imported {_plural(imported, 'memory item')}"
        skipped = invalid + duplicate
        if skipped:
            return CommandResult(f"{text}. Skipped {skipped} (duplicate or invalid).")
        return CommandResult(f"{text}.")


def create_docs_memory(
    config: DocsMemoryConfig,
    store: MemoryStore,
    redactor: Redactor | None = None,
) -> DocsMemory:
    """Bind the command handlers to explicit collaborators."""
    return DocsMemory(config, store, redactor)

"""Compact one-line renderings of memory items for command replies."""

from __future__ import annotations

from collections.abc import Sequence

from memdocs.memory.types import MemoryItem, SearchHit

SHORT_ID_LENGTH = 8
PREVIEW_LENGTH = 120
ELLIPSIS = "…"


def short_id(id: str) -> str:
    return id[:SHORT_ID_LENGTH]


def preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + ELLIPSIS
    return text


def extra_tags(tags: Sequence[str] | None, default_tags: Sequence[str]) -> list[str]:
    """Tags not in the default set, in their original order."""
    defaults = set(default_tags)
    return [t for t in tags or [] if t not in defaults]


def tags_badge(tags: Sequence[str] | None, default_tags: Sequence[str]) -> str:
    extra = extra_tags(tags, default_tags)
    return f" [tags:{','.join(extra)}]" if extra else ""


def project_badge(item: MemoryItem) -> str:
    project = item.project
    return f" [project:{project}]" if project is not None else ""


def format_search_line(index: int, hit: SearchHit, default_tags: Sequence[str]) -> str:
    item = hit.item
    return (
        f"{index}. [id:{short_id(item.id)}] ({hit.score:.2f})"
        f"{tags_badge(item.tags, default_tags)}{project_badge(item)} {preview(item.text)}"
    )


def format_list_line(index: int, item: MemoryItem, default_tags: Sequence[str]) -> str:
    return (
        f"{index}. [id:{short_id(item.id)}] {item.created_at[:10]}"
        f"{tags_badge(item.tags, default_tags)}{project_badge(item)} {preview(item.text)}"
    )

"""Structured search tool for agent access to docs memory.

The tool takes a parameter dict instead of a raw argument string, so it
is validated into SearchToolParams before reaching the orchestrator.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from memdocs.core import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT
from memdocs.safety import safe_limit

if TYPE_CHECKING:
    from memdocs.core import DocsMemory

SEARCH_TOOL_NAME = "docs_memory_search"

SEARCH_TOOL_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "query": {"type": "string"},
        "limit": {"type": "number", "minimum": 1, "maximum": SEARCH_MAX_LIMIT, "default": 5},
        "tags": {"type": "array", "items": {"type": "string"}},
        "project": {"type": "string"},
    },
    "required": ["query"],
}


@dataclass
class SearchToolParams:
    """Validated docs_memory_search parameters."""

    query: str
    limit: int = SEARCH_DEFAULT_LIMIT
    tags: list[str] | None = None
    project: str | None = None

    @classmethod
    def from_dict(cls, params: dict[str, Any]) -> SearchToolParams:
        query = params.get("query", "")
        if not isinstance(query, str):
            raise ValueError("query must be a string")

        tags = params.get("tags")
        if tags is not None and (
            not isinstance(tags, list) or not all(isinstance(t, str) for t in tags)
        ):
            raise ValueError("tags must be a list of strings")

        project = params.get("project")
        if project is not None and not isinstance(project, str):
            raise ValueError("project must be a string")

        return cls(
            query=query.strip(),
            limit=safe_limit(params.get("limit"), SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT),
            tags=[t.strip() for t in tags if t.strip()] if tags else None,
            project=project.strip() if project and project.strip() else None,
        )


def get_memory_tools(docs: DocsMemory) -> dict[str, Callable[[dict], Awaitable[dict]]]:
    """Return a dict of tool_name -> coroutine function for docs memory tools."""

    async def docs_memory_search(params: dict[str, Any]) -> dict[str, Any]:
        """Search documentation memory items."""
        p = SearchToolParams.from_dict(params)
        if not p.query:
            return {"hits": []}

        hits = await docs.search_hits(p.query, p.limit, p.tags, p.project)
        results = []
        for h in hits:
            entry: dict[str, Any] = {
                "score": h.score,
                "id": h.item.id,
                "createdAt": h.item.created_at,
                "tags": h.item.tags,
                "text": h.item.text,
            }
            if h.item.project is not None:
                entry["project"] = h.item.project
            results.append(entry)
        return {"storePath": docs.config.store_path, "hits": results}

    return {SEARCH_TOOL_NAME: docs_memory_search}

"""Markdown <-> MemoryItem conversion for export/import.

Frontmatter is written by hand so the layout stays stable:

    ---
    id: <id>
    kind: doc
    createdAt: <iso timestamp>
    tags:
      - <tag>
    project: <name>
    ---

    <text>

Reading uses a python-frontmatter handler to detect and split the block,
then reads it line by line: `key: value` lines are scalars and `- value`
lines under a bare `key:` are list items. Values are kept verbatim after
trimming, so user tags and project names are never reinterpreted as YAML
(no comments, anchors, quoting or type coercion).
"""

from __future__ import annotations

import re

from frontmatter.default_handlers import BaseHandler

from memdocs.formatting import short_id
from memdocs.memory.types import MemoryItem

MARKDOWN_SUFFIX = ".md"

_LIST_ITEM = re.compile(r"^\s*-(?:\s+(.*))?$")


class _LineHandler(BaseHandler):
    """Frontmatter delimited by bare `---` lines, read as flat key/value lines."""

    FM_BOUNDARY = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)
    START_DELIMITER = END_DELIMITER = "---"

    def load(self, fm: str, **kwargs) -> dict[str, str | list[str]]:
        metadata: dict[str, str | list[str]] = {}
        current: list[str] | None = None
        for line in fm.splitlines():
            if not line.strip():
                continue
            item = _LIST_ITEM.match(line)
            if item:
                if current is not None:
                    current.append((item.group(1) or "").strip())
                continue
            current = None
            key, sep, value = line.partition(":")
            key = key.strip()
            if not sep or not key:
                continue
            value = value.strip()
            if value:
                metadata[key] = value
            else:
                current = metadata[key] = []
        return metadata


_HANDLER = _LineHandler()


def _drop_line_break(text: str) -> str:
    if text.startswith("\r\n"):
        return text[2:]
    if text.startswith("\n"):
        return text[1:]
    return text


def encode_markdown(item: MemoryItem) -> str:
    """Render an item as markdown with frontmatter."""
    lines = [
        "---",
        f"id: {item.id}",
        f"kind: {item.kind}",
        f"createdAt: {item.created_at}",
    ]
    if item.tags:
        lines.append("tags:")
        lines.extend(f"  - {tag}" for tag in item.tags)
    if item.project is not None:
        lines.append(f"project: {item.project}")
    lines.append("---")
    lines.append("")
    lines.append(item.text)
    return "\n".join(lines) + "\n"


def decode_markdown(content: str) -> MemoryItem | None:
    """Parse a markdown document back into an item.

    Returns None for anything that is not a complete export: no leading
    frontmatter, no closing delimiter, a missing id/kind/createdAt, or an
    empty body. Leading whitespace of the body is kept.
    """
    if not _HANDLER.detect(content):
        return None
    try:
        fm, body = _HANDLER.split(content)
    except ValueError:
        return None
    metadata = _HANDLER.load(fm)

    fields = {}
    for key in ("id", "kind", "createdAt"):
        value = metadata.get(key)
        if not isinstance(value, str):
            return None
        fields[key] = value

    # End of the closing delimiter line, then the optional blank separator.
    text = _drop_line_break(_drop_line_break(body)).rstrip()
    if not text:
        return None

    tags = None
    raw_tags = metadata.get("tags")
    if isinstance(raw_tags, list):
        tags = [t for t in raw_tags if t] or None

    meta = None
    project = metadata.get("project")
    if isinstance(project, str):
        meta = {"project": project}

    return MemoryItem(
        id=fields["id"],
        kind=fields["kind"],
        text=text,
        created_at=fields["createdAt"],
        tags=tags,
        meta=meta,
    )


def export_filename(item: MemoryItem) -> str:
    """`<YYYY-MM-DD>_<short id>.md` for an exported item."""
    return f"{item.created_at[:10]}_{short_id(item.id)}{MARKDOWN_SUFFIX}"

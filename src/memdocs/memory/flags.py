"""Flag extraction for docs memory command arguments.

Recognized flags, anywhere in the argument string:
    --tags=a,b   / --tags a,b
    --project=x  / --project x

Values are read from the original string: the first occurrence of a flag
wins, equals form checked first. Every flag token, including a bare flag
with no value, is stripped from the residual text in a single pass, so
parsing the residual again finds nothing.
"""

from __future__ import annotations

import re

from memdocs.memory.types import ParsedFlags


def _flag_patterns(name: str) -> tuple[str, ...]:
    return (
        rf"(?<!\S)--{name}=(\S+)",
        rf"(?<!\S)--{name}\s+(?!--)(\S+)",
        rf"(?<!\S)--{name}=?(?=\s|$)()",
    )


_TAGS_PATTERNS = tuple(re.compile(p) for p in _flag_patterns("tags"))
_PROJECT_PATTERNS = tuple(re.compile(p) for p in _flag_patterns("project"))
_ANY_FLAG = re.compile("|".join(_flag_patterns("tags") + _flag_patterns("project")))
_WHITESPACE = re.compile(r"\s+")


def _first_value(text: str, patterns: tuple[re.Pattern[str], ...]) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def split_tags(value: str | None) -> list[str]:
    """Split a comma list, trimming entries and dropping empty ones."""
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def parse_flags(raw: str | None) -> ParsedFlags:
    """Extract --tags/--project from raw args. Never raises."""
    text = raw or ""
    residual = _ANY_FLAG.sub(" ", text)
    return ParsedFlags(
        tags=split_tags(_first_value(text, _TAGS_PATTERNS)),
        project=_first_value(text, _PROJECT_PATTERNS) or None,
        text=_WHITESPACE.sub(" ", residual).strip(),
    )

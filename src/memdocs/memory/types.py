"""Memory item model and its wire (camelCase dict) form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class MemorySource:
    """Where a captured note came from. Opaque to the orchestrator."""

    channel: str | None = None
    sender: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None

    def is_empty(self) -> bool:
        return not any((self.channel, self.sender, self.conversation_id, self.message_id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "from": self.sender,
            "conversationId": self.conversation_id,
            "messageId": self.message_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemorySource:
        return cls(
            channel=data.get("channel"),
            sender=data.get("from"),
            conversation_id=data.get("conversationId"),
            message_id=data.get("messageId"),
        )


@dataclass
class MemoryItem:
    """A captured documentation note."""

    id: str
    kind: str
    text: str
    created_at: str
    tags: list[str] | None = None
    source: MemorySource | None = None
    meta: dict[str, Any] | None = None

    @property
    def project(self) -> str | None:
        if self.meta and isinstance(self.meta.get("project"), str):
            return self.meta["project"]
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "text": self.text,
            "createdAt": self.created_at,
        }
        if self.tags is not None:
            data["tags"] = list(self.tags)
        if self.source is not None:
            data["source"] = self.source.to_dict()
        if self.meta is not None:
            data["meta"] = dict(self.meta)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryItem:
        source = data.get("source")
        return cls(
            id=data["id"],
            kind=data.get("kind", "doc"),
            text=data["text"],
            created_at=data["createdAt"],
            tags=list(data["tags"]) if data.get("tags") is not None else None,
            source=MemorySource.from_dict(source) if source else None,
            meta=dict(data["meta"]) if data.get("meta") is not None else None,
        )


@dataclass
class SearchHit:
    """A memory item with its relevance score (higher is better)."""

    item: MemoryItem
    score: float


@dataclass
class RedactionResult:
    """Outcome of running the secret redactor over a note."""

    redacted_text: str
    had_secrets: bool = False
    matches: list[Any] = field(default_factory=list)


@dataclass
class ParsedFlags:
    """Flags pulled out of a raw command argument string."""

    tags: list[str] = field(default_factory=list)
    project: str | None = None
    text: str = ""

"""Host registration: commands and tools exposed by the docs memory plugin."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from memdocs.config import DocsMemoryConfig
from memdocs.core import CommandContext, CommandResult, DocsMemory, create_docs_memory
from memdocs.tools.memory_tools import SEARCH_TOOL_NAME, SEARCH_TOOL_SCHEMA, get_memory_tools

if TYPE_CHECKING:
    from memdocs.memory.base import MemoryStore, Redactor

logger = logging.getLogger(__name__)

CommandHandler = Callable[[CommandContext], Awaitable[CommandResult]]
ToolHandler = Callable[[dict], Awaitable[dict]]


@dataclass
class CommandDefinition:
    """A slash command the host can dispatch to."""

    name: str
    description: str
    handler: CommandHandler
    require_auth: bool = False
    accepts_args: bool = True


@dataclass
class ToolDefinition:
    """A structured tool the agent can call."""

    name: str
    description: str
    handler: ToolHandler
    input_schema: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class PluginHost(Protocol):
    """What the plugin needs from its host runtime."""

    def register_command(self, definition: CommandDefinition) -> None: ...

    def register_tool(self, definition: ToolDefinition) -> None: ...


def _guarded(name: str, handler: CommandHandler) -> CommandHandler:
    """Translate collaborator failures into reply text."""

    async def run(ctx: CommandContext) -> CommandResult:
        try:
            return await handler(ctx)
        except Exception as e:
            logger.exception("/%s failed", name)
            return CommandResult(f"{name} failed: {e}")

    return run


def build_commands(docs: DocsMemory) -> list[CommandDefinition]:
    table = [
        ("remember-doc", "Save a documentation memory item (explicit capture)", docs.remember, False),
        ("search-docs", "Search documentation memory items", docs.search, False),
        ("list-docs", "List recent documentation memory items", docs.list, False),
        ("forget-doc", "Delete a documentation memory item by id", docs.forget, True),
        ("export-docs", "Export documentation memory items as markdown files", docs.export, False),
        ("import-docs", "Import documentation memory items from markdown files", docs.import_docs, True),
    ]
    return [
        CommandDefinition(
            name=name,
            description=description,
            handler=_guarded(name, handler),
            require_auth=require_auth,
        )
        for name, description, handler, require_auth in table
    ]


def register(
    host: PluginHost,
    config: DocsMemoryConfig,
    store: MemoryStore,
    redactor: Redactor | None = None,
) -> DocsMemory | None:
    """Register all commands and tools on the host. No-op when disabled."""
    if not config.enabled:
        logger.info("[memory-docs] disabled")
        return None

    docs = create_docs_memory(config, store, redactor)
    for command in build_commands(docs):
        host.register_command(command)

    tools = get_memory_tools(docs)
    host.register_tool(
        ToolDefinition(
            name=SEARCH_TOOL_NAME,
            description="Search documentation memory items",
            handler=tools[SEARCH_TOOL_NAME],
            input_schema=SEARCH_TOOL_SCHEMA,
        )
    )

    logger.info("[memory-docs] enabled. store=%s", config.store_path)
    return docs

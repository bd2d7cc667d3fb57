"""Configuration loading from environment variables, memdocs.toml and host plugin config."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path
from typing import Any

from memdocs.safety import expand_home

_DEFAULT_STORE_PATH = "~/.openclaw/workspace/memory/docs-memory.jsonl"
_CONFIG_FILENAME = "memdocs.toml"

DEFAULT_EXPORT_DIR = "~/.openclaw/workspace/memory/docs-export"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return default
    return [t.strip() for t in value.split(",") if t.strip()]


@dataclass
class DocsMemoryConfig:
    """Docs memory plugin configuration."""

    enabled: bool = True
    store_path: str = field(default_factory=lambda: expand_home(_DEFAULT_STORE_PATH))
    dims: int = 256
    redact_secrets: bool = True
    default_tags: list[str] = field(default_factory=lambda: ["docs"])
    max_items: int = 5000
    export_path: str | None = None

    @classmethod
    def from_plugin_config(cls, data: dict[str, Any] | None) -> DocsMemoryConfig:
        """Build from the host's camelCase plugin config dict."""
        data = data or {}
        export_path = data.get("exportPath")
        return cls(
            enabled=data.get("enabled") is not False,
            store_path=expand_home(data.get("storePath") or _DEFAULT_STORE_PATH),
            dims=int(data.get("dims", 256)),
            redact_secrets=data.get("redactSecrets") is not False,
            default_tags=list(data.get("defaultTags", ["docs"])),
            max_items=int(data.get("maxItems", 5000)),
            export_path=expand_home(export_path) if export_path else None,
        )


def load_config(config_path: Path | None = None) -> DocsMemoryConfig:
    """Load configuration from environment variables and optional memdocs.toml.

    Priority: environment variables > memdocs.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.memdocs/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".memdocs" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    docs_data = file_data.get("docs", {})
    export_path = os.getenv("MEMDOCS_EXPORT_PATH", docs_data.get("export_path"))

    return DocsMemoryConfig(
        enabled=_env_bool("MEMDOCS_ENABLED", docs_data.get("enabled", True)),
        store_path=expand_home(
            os.getenv("MEMDOCS_STORE_PATH", docs_data.get("store_path", _DEFAULT_STORE_PATH))
        ),
        dims=int(os.getenv("MEMDOCS_DIMS", docs_data.get("dims", 256))),
        redact_secrets=_env_bool("MEMDOCS_REDACT_SECRETS", docs_data.get("redact_secrets", True)),
        default_tags=_env_list("MEMDOCS_DEFAULT_TAGS", docs_data.get("default_tags", ["docs"])),
        max_items=int(os.getenv("MEMDOCS_MAX_ITEMS", docs_data.get("max_items", 5000))),
        export_path=expand_home(export_path) if export_path else None,
    )

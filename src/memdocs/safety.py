"""Input guards shared by the commands: result limits and user paths."""

from __future__ import annotations

import math
from pathlib import Path


class UnsafePathError(ValueError):
    """Raised when a user-supplied path fails validation."""


def safe_limit(value: object, default: int, maximum: int) -> int:
    """Coerce a limit into [1, maximum].

    Non-numeric, non-finite or sub-1 input falls back to `default`;
    anything above `maximum` is clamped down to it.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return maximum if number > 0 else default
    if number < 1:
        return default
    return min(int(number), maximum)


def expand_home(path: str) -> str:
    if path == "~":
        return str(Path.home())
    if path.startswith("~/"):
        return str(Path.home() / path[2:])
    return path


def assert_safe_path(path: str, label: str) -> Path:
    """Reject empty paths, NUL bytes and `..` traversal segments."""
    if not path or not path.strip():
        raise UnsafePathError(f"{label} path is empty")
    if "\x00" in path:
        raise UnsafePathError(f"{label} path contains a NUL byte")
    if ".." in Path(path).parts:
        raise UnsafePathError(f"{label} path must not contain '..': {path}")
    return Path(path)

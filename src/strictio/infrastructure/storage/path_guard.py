"""Path checks applied before a path reaches the platform open call."""

from __future__ import annotations

import os
import re
from pathlib import Path

from strictio.domain.errors import InvalidPathError


_DATA_URI_PATTERN = re.compile(r"^data:", re.IGNORECASE)
_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+)://")


def is_data_uri(path: str) -> bool:
    return bool(_DATA_URI_PATTERN.match(path or ""))


def validate_path(path: str | Path) -> str:
    """Return ``path`` as a string, rejecting values no file can have."""
    raw = os.fspath(path) if isinstance(path, os.PathLike) else path
    if isinstance(raw, bytes):
        raw = os.fsdecode(raw)
    if not isinstance(raw, str):
        raise InvalidPathError(f"path must be a string, got {type(path).__name__}")
    if not raw.strip():
        raise InvalidPathError("path is required")
    if "\x00" in raw:
        raise InvalidPathError(f"path contains a NUL byte: {raw!r}")
    match = _SCHEME_PATTERN.match(raw)
    if match and match.group(1).lower() != "file":
        raise InvalidPathError(f"unsupported scheme: {match.group(1)}")
    return raw


def local_path(path: str) -> str:
    """Strip a ``file://`` prefix."""
    if path[:7].lower() == "file://":
        return path[7:]
    return path

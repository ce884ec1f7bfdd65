"""Operation targets: a path to open or a handle the caller already owns."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

Opener = Callable[[str, int, int], int]


@dataclass(frozen=True)
class StreamContext:
    """Opaque per-call options handed to the platform open call.

    ``permissions`` are the mode bits used when a file is created (``None``
    uses the configured default). ``opener`` replaces ``os.open`` and receives
    ``(path, flags, permissions)``.
    """

    permissions: Optional[int] = None
    opener: Optional[Opener] = None


@dataclass(frozen=True)
class PathTarget:
    """A file path or URI, opened and closed by the operation itself."""
    path: str


@dataclass(frozen=True)
class HandleTarget:
    """A caller-owned open handle; never closed by the operation."""
    handle: Any


Target = Union[PathTarget, HandleTarget]


def _is_stream(value: Any) -> bool:
    if isinstance(value, io.IOBase):
        return True
    return all(hasattr(value, attr) for attr in ("read", "write", "seek", "close"))


def as_target(source: Any) -> Target:
    """Tag ``source`` once so operations dispatch on a single variant."""
    if isinstance(source, (PathTarget, HandleTarget)):
        return source
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return PathTarget(path)
    if _is_stream(source):
        return HandleTarget(source)
    raise TypeError(f"expected a path or an open handle, got {type(source).__name__}")

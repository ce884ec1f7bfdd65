"""Handle lifecycle: open, close, validity and metadata.

Handles returned by ``open_file`` are unbuffered binary streams
(``io.FileIO`` for files, ``DataURIStream`` for ``data:`` URIs) owned by the
caller until passed to ``close_file``.
"""

from __future__ import annotations

import os
import weakref
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import structlog

from strictio.domain.errors import CloseFailed, OpenFailed
from strictio.domain.modes import FileMode, parse_file_mode
from strictio.domain.targets import StreamContext
from strictio.infrastructure.escalation import ErrorEscalator, watch
from strictio.infrastructure.storage.data_uri import DataURIStream
from strictio.infrastructure.storage.path_guard import is_data_uri, local_path, validate_path

logger = structlog.get_logger()

_open_escalator = ErrorEscalator(OpenFailed)
_close_escalator = ErrorEscalator(CloseFailed)

# Metadata for handles opened here; entries vanish with their handle.
_opened: "weakref.WeakKeyDictionary[Any, StreamInfo]" = weakref.WeakKeyDictionary()


@dataclass(frozen=True)
class StreamInfo:
    """Metadata describing an open handle."""
    mode: str
    stream_type: str
    uri: str
    wrapper_type: str
    seekable: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _open_data_uri(uri: str, mode: FileMode) -> DataURIStream:
    from strictio.config import settings

    if not settings.data_uri_enabled:
        raise PermissionError("data: URIs are disabled (STRICTIO_DATA_URI_ENABLED)")
    if mode.writable:
        raise PermissionError(f"rfc2397: data streams cannot be opened with mode {mode.token!r}")
    stream = DataURIStream(uri, mode.token)
    _opened[stream] = StreamInfo(
        mode=mode.token,
        stream_type="RFC2397",
        uri=uri,
        wrapper_type="RFC2397",
        seekable=True,
    )
    return stream


def _open_stream(path: Any, mode: FileMode | str, context: Optional[StreamContext] = None):
    """Open without escalation, for callers already inside a scope."""
    from strictio.config import settings

    file_mode = parse_file_mode(mode)
    location = validate_path(path)
    if is_data_uri(location):
        return _open_data_uri(location, file_mode)

    ctx = context or StreamContext()
    permissions = settings.default_permissions if ctx.permissions is None else ctx.permissions
    open_descriptor = ctx.opener or os.open

    def opener(name: str, _flags: int) -> int:
        return open_descriptor(name, file_mode.flags, permissions)

    stream = open(local_path(location), file_mode.io_mode, buffering=0, opener=opener)
    _opened[stream] = StreamInfo(
        mode=file_mode.token,
        stream_type="STDIO",
        uri=location,
        wrapper_type="plainfile",
        seekable=stream.seekable(),
    )
    logger.debug("file_opened", path=location, mode=file_mode.token)
    return stream


def open_file(path: Any, mode: FileMode | str, context: Optional[StreamContext] = None):
    """Open ``path`` with ``mode``.

    Args:
        path: File path, ``file://`` path or ``data:`` URI
        mode: FileMode or its token ("r", "c+", ...)
        context: Optional StreamContext passed to the platform open call

    Returns:
        An unbuffered binary handle

    Raises:
        OpenFailed: missing file, existing file under an exclusive mode,
            malformed path or URI, permission problems
    """
    return _open_escalator.watch(_open_stream, path, mode, context)


def is_closed(handle: Any) -> bool:
    """True when ``handle`` is closed or is not a stream at all."""
    try:
        closed = handle.closed
    except (AttributeError, ValueError):
        # Detached buffered streams raise instead of reporting a state.
        return True
    return closed if isinstance(closed, bool) else True


def _close_stream(handle: Any) -> None:
    if is_closed(handle):
        raise ValueError(f"Invalid stream: {type(handle).__name__} is already closed or not a stream")
    info = _opened.pop(handle, None)
    handle.close()
    logger.debug("file_closed", uri=info.uri if info else getattr(handle, "name", ""))


def close_file(handle: Any) -> None:
    """Close ``handle``; raise ``CloseFailed`` for a closed or invalid handle."""
    _close_escalator.watch(_close_stream, handle)


def _describe_stream(handle: Any) -> StreamInfo:
    if is_closed(handle):
        raise ValueError("Invalid stream: cannot describe a closed handle")
    info = _opened.get(handle)
    if info is not None:
        return info
    name = getattr(handle, "name", None)
    on_disk = isinstance(name, str) and bool(name)
    return StreamInfo(
        mode=str(getattr(handle, "mode", "")),
        stream_type="STDIO" if on_disk else "MEMORY",
        uri=name if on_disk else "",
        wrapper_type="plainfile" if on_disk else "",
        seekable=bool(handle.seekable()),
    )


def describe(handle: Any) -> StreamInfo:
    """Return metadata for an open handle.

    Handles opened elsewhere are described from their ``mode`` and ``name``.
    """
    return watch(_describe_stream, handle)

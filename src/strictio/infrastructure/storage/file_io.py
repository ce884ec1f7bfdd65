"""Byte-range reads and positional writes over paths or open handles.

Both operations accept either a path (opened and closed within the call) or a
caller-owned handle (left open). Results are identical for both shapes over
the same content.
"""

from __future__ import annotations

import errno
import io
import os
from typing import Any, Optional

import structlog

from strictio.domain.errors import CloseFailed, ReadFailed, WriteFailed
from strictio.domain.modes import FileMode, WriteMode, parse_write_mode
from strictio.domain.targets import PathTarget, StreamContext, as_target
from strictio.infrastructure.escalation import ErrorEscalator
from strictio.infrastructure.storage.handles import _open_stream, close_file, is_closed, open_file

logger = structlog.get_logger()

_read_escalator = ErrorEscalator(ReadFailed)
_write_escalator = ErrorEscalator(WriteFailed)


def _check_stream(stream: Any, access: str) -> None:
    """Reject closed, text or wrongly-moded handles before touching them."""
    if is_closed(stream):
        raise ValueError(f"Invalid stream: the handle is closed, cannot {access}")
    if isinstance(stream, io.TextIOBase):
        raise TypeError(f"Invalid stream: text streams are not supported, cannot {access}")
    if access == "read":
        allowed, purpose = stream.readable(), "reading"
    else:
        allowed, purpose = stream.writable(), "writing"
    if not allowed:
        raise OSError(errno.EBADF, f"Bad file descriptor: the handle is not open for {purpose}")


def _check_range(offset: Optional[int], length: Optional[int]) -> None:
    if offset is not None and offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")
    if length is not None and length < 0:
        raise ValueError(f"length must be >= 0, got {length}")


def _skip(stream: Any, count: int) -> None:
    from strictio.config import settings

    remaining = count
    while remaining > 0:
        chunk = stream.read(min(remaining, settings.skip_chunk_size))
        if not chunk:
            return
        remaining -= len(chunk)


def _read_stream(stream: Any, offset: int = 0, length: Optional[int] = None) -> bytes:
    _check_stream(stream, "read")
    _check_range(offset, length)
    if stream.seekable():
        stream.seek(offset, os.SEEK_SET)
    elif offset:
        _skip(stream, offset)

    if length is None:
        return stream.read() or b""

    # Raw streams may return fewer bytes than asked for.
    chunks = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _read_target(source: Any, context: Optional[StreamContext], offset: int, length: Optional[int]) -> bytes:
    target = as_target(source)
    if isinstance(target, PathTarget):
        with _open_stream(target.path, FileMode.READ_IF_EXISTS, context) as stream:
            return _read_stream(stream, offset, length)
    return _read_stream(target.handle, offset, length)


def read(
    source: Any,
    context: Optional[StreamContext] = None,
    offset: int = 0,
    length: Optional[int] = None,
) -> bytes:
    """Read up to ``length`` bytes starting at ``offset``.

    Args:
        source: Path, ``data:`` URI or open binary handle
        context: Optional StreamContext for the open call (paths only)
        offset: Bytes to skip from the start of the data
        length: Max bytes to read (None = to end of data)

    Returns:
        The bytes read; empty when ``offset`` is past the end of a file

    Raises:
        ReadFailed: missing file, closed or write-only handle, bad seek
    """
    return _read_escalator.watch(_read_target, source, context, offset, length)


def _position(stream: Any, mode: WriteMode, offset: Optional[int]) -> None:
    if mode is WriteMode.APPEND:
        stream.seek(0, os.SEEK_END)
    elif mode is WriteMode.OVERWRITE:
        if offset is not None:
            stream.seek(offset, os.SEEK_SET)
    elif mode is WriteMode.TRUNCATE:
        size = offset or 0
        stream.truncate(size)
        end = stream.seek(0, os.SEEK_END)
        if end < size:
            # In-memory streams do not grow on truncate; pad the gap here.
            _zero_fill(stream, size - end)


def _zero_fill(stream: Any, count: int) -> None:
    remaining = count
    while remaining > 0:
        filled = stream.write(b"\0" * remaining)
        if not filled:
            raise OSError(errno.EIO, f"unable to zero-fill {remaining} bytes before writing")
        remaining -= filled


def _write_stream(
    stream: Any,
    data: Any,
    mode: WriteMode,
    offset: Optional[int],
    length: Optional[int],
) -> int:
    if isinstance(data, str):
        raise TypeError("data must be bytes-like, not str")
    payload = memoryview(data).cast("B")
    _check_stream(stream, "write")
    _check_range(offset, length)
    if length is not None:
        payload = payload[:length]

    _position(stream, mode, offset)
    written = stream.write(payload)
    # A short write is reported as-is, never retried.
    return written or 0


def _close_after_failure(handle: Any, path: str) -> None:
    """Close the implicit handle without masking the error already in flight."""
    try:
        close_file(handle)
    except CloseFailed as close_error:
        logger.warning("implicit_close_failed", path=path, error=str(close_error))


def _write_target(
    target: Any,
    data: Any,
    mode: WriteMode | str,
    offset: Optional[int],
    length: Optional[int],
    context: Optional[StreamContext],
) -> int:
    write_mode = parse_write_mode(mode)
    resolved = as_target(target)
    if isinstance(resolved, PathTarget):
        handle = open_file(resolved.path, FileMode.WRITE, context)
        try:
            written = write(handle, data, write_mode, offset, length)
        except BaseException:
            _close_after_failure(handle, resolved.path)
            raise
        close_file(handle)
        logger.debug(
            "write_completed",
            path=resolved.path,
            mode=write_mode.name,
            bytes_written=written,
        )
        return written
    return _write_stream(resolved.handle, data, write_mode, offset, length)


def write(
    target: Any,
    data: Any,
    mode: WriteMode | str = WriteMode.OVERWRITE,
    offset: Optional[int] = None,
    length: Optional[int] = None,
    context: Optional[StreamContext] = None,
) -> int:
    """Write ``data`` to a path or open handle.

    Args:
        target: Path or open binary handle
        data: Bytes-like payload
        mode: APPEND (offset ignored), OVERWRITE (at offset or cursor) or
            TRUNCATE (resize to offset, then write at the end)
        offset: Position for OVERWRITE, new size for TRUNCATE
        length: Max bytes of ``data`` to transfer
        context: Optional StreamContext for the open call (paths only)

    Returns:
        Number of bytes the platform accepted

    Raises:
        WriteFailed: read-only or closed handle, read-only scheme, open failure
    """
    return _write_escalator.watch(_write_target, target, data, mode, offset, length, context)

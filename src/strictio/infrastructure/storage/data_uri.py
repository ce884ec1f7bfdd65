"""Read-only streams over RFC 2397 ``data:`` URIs.

    data:[<mediatype>][;base64],<data>

The payload is decoded once at open time. Streams are seekable within the
payload; seeking past its end fails because inline data cannot grow.
"""

from __future__ import annotations

import base64
import binascii
import errno
import io
import os
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes


DEFAULT_MEDIA_TYPE = "text/plain;charset=US-ASCII"


@dataclass(frozen=True)
class DataURI:
    """Parsed ``data:`` URI."""
    media_type: str
    base64: bool
    payload: bytes


def parse_data_uri(uri: str) -> DataURI:
    """Parse and decode a ``data:`` URI; raise ``ValueError`` when malformed."""
    if uri[:5].lower() != "data:":
        raise ValueError(f"not a data URI: {uri[:32]!r}")
    header, sep, body = uri[5:].partition(",")
    if not sep:
        raise ValueError("rfc2397: no comma in URL")

    params = [part.strip() for part in header.split(";")] if header else []
    is_base64 = bool(params) and params[-1].lower() == "base64"
    if is_base64:
        params = params[:-1]
    if params and params[0] and "/" not in params[0]:
        raise ValueError(f"rfc2397: illegal media type {params[0]!r}")
    for param in params[1:]:
        if "=" not in param:
            raise ValueError(f"rfc2397: illegal parameter {param!r}")

    media_type = ";".join(params) if params and params[0] else DEFAULT_MEDIA_TYPE
    raw = unquote_to_bytes(body)
    if is_base64:
        try:
            payload = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"rfc2397: unable to decode: {exc}") from exc
    else:
        payload = raw
    return DataURI(media_type=media_type, base64=is_base64, payload=payload)


class DataURIStream(io.RawIOBase):
    """Unbuffered, read-only stream over a decoded ``data:`` payload."""

    def __init__(self, uri: str, mode: str = "r"):
        super().__init__()
        self._parsed = parse_data_uri(uri)
        self._data = self._parsed.payload
        self._pos = 0
        self.name = uri
        self.mode = mode

    @property
    def media_type(self) -> str:
        return self._parsed.media_type

    def readable(self) -> bool:
        self._checkClosed()
        return True

    def writable(self) -> bool:
        self._checkClosed()
        return False

    def seekable(self) -> bool:
        self._checkClosed()
        return True

    def tell(self) -> int:
        self._checkClosed()
        return self._pos

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._checkClosed()
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._pos + offset
        elif whence == os.SEEK_END:
            target = len(self._data) + offset
        else:
            raise ValueError(f"invalid whence ({whence})")
        if target < 0 or target > len(self._data):
            raise OSError(
                errno.EINVAL,
                f"rfc2397: unable to seek to position {target}, inline data holds {len(self._data)} bytes",
            )
        self._pos = target
        return self._pos

    def readinto(self, buffer) -> int:
        self._checkClosed()
        view = memoryview(buffer).cast("B")
        chunk = self._data[self._pos:self._pos + len(view)]
        view[:len(chunk)] = chunk
        self._pos += len(chunk)
        return len(chunk)

    def readall(self) -> bytes:
        self._checkClosed()
        chunk = self._data[self._pos:]
        self._pos = len(self._data)
        return chunk

    def write(self, data) -> int:
        self._checkClosed()
        raise io.UnsupportedOperation("rfc2397: data streams are read-only")

    def truncate(self, size=None) -> int:
        self._checkClosed()
        raise io.UnsupportedOperation("rfc2397: data streams are read-only")

    def fileno(self) -> int:
        raise io.UnsupportedOperation("rfc2397: data streams have no file descriptor")

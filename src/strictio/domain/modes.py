"""Access modes used to open handles and write modes used by ``write``."""

from __future__ import annotations

import os
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Tuple


class FileMode(Enum):
    """File access modes, valued by their fopen-style token."""

    READ_IF_EXISTS = "r"  # Read only; file must exist
    READ_WRITE_IF_EXISTS = "r+"  # Read/write; file must exist
    WRITE_TRUNC = "w"  # Write only; create or truncate
    READ_WRITE_TRUNC = "w+"  # Read/write; create or truncate
    WRITE_APPEND = "a"  # Write only; create, every write goes to the end
    READ_WRITE_APPEND = "a+"  # Read/write; create, every write goes to the end
    WRITE_IF_NOT_EXISTS = "x"  # Write only; file must not exist
    READ_WRITE_IF_NOT_EXISTS = "x+"  # Read/write; file must not exist
    WRITE = "c"  # Write only; create, never truncate
    READ_WRITE = "c+"  # Read/write; create, never truncate
    CLOSE_ON_EXEC = "e"  # Read only; descriptor closed on exec

    @property
    def token(self) -> str:
        return self.value

    @property
    def flags(self) -> int:
        """``os.open`` flags for this mode."""
        return _PLATFORM_MODES[self][0] | _BINARY

    @property
    def io_mode(self) -> str:
        """Mode string accepted by an unbuffered ``open()``."""
        return _PLATFORM_MODES[self][1]

    @property
    def readable(self) -> bool:
        return "r" in self.io_mode or "+" in self.io_mode

    @property
    def writable(self) -> bool:
        return self.io_mode != "rb"

    @property
    def creates(self) -> bool:
        return bool(self.flags & os.O_CREAT)

    @property
    def exclusive(self) -> bool:
        return bool(self.flags & os.O_EXCL)


class WriteMode(Enum):
    """Cursor and truncation policy of a single ``write`` call."""

    APPEND = auto()  # Seek to end; offset ignored
    OVERWRITE = auto()  # Seek to offset (or keep cursor); replace bytes in place
    TRUNCATE = auto()  # Truncate to offset (or zero); write at the new end


_BINARY = getattr(os, "O_BINARY", 0)
_CLOEXEC = getattr(os, "O_CLOEXEC", 0) | getattr(os, "O_NOINHERIT", 0)

_PLATFORM_MODES: Mapping[FileMode, Tuple[int, str]] = MappingProxyType({
    FileMode.READ_IF_EXISTS: (os.O_RDONLY, "rb"),
    FileMode.READ_WRITE_IF_EXISTS: (os.O_RDWR, "r+b"),
    FileMode.WRITE_TRUNC: (os.O_WRONLY | os.O_CREAT | os.O_TRUNC, "wb"),
    FileMode.READ_WRITE_TRUNC: (os.O_RDWR | os.O_CREAT | os.O_TRUNC, "w+b"),
    FileMode.WRITE_APPEND: (os.O_WRONLY | os.O_CREAT | os.O_APPEND, "ab"),
    FileMode.READ_WRITE_APPEND: (os.O_RDWR | os.O_CREAT | os.O_APPEND, "a+b"),
    FileMode.WRITE_IF_NOT_EXISTS: (os.O_WRONLY | os.O_CREAT | os.O_EXCL, "xb"),
    FileMode.READ_WRITE_IF_NOT_EXISTS: (os.O_RDWR | os.O_CREAT | os.O_EXCL, "x+b"),
    # The opener supplies the real flags, so "wb" here never truncates.
    FileMode.WRITE: (os.O_WRONLY | os.O_CREAT, "wb"),
    FileMode.READ_WRITE: (os.O_RDWR | os.O_CREAT, "r+b"),
    FileMode.CLOSE_ON_EXEC: (os.O_RDONLY | _CLOEXEC, "rb"),
})


def parse_file_mode(mode: "FileMode | str") -> FileMode:
    """Accept a FileMode or its token."""
    if isinstance(mode, FileMode):
        return mode
    try:
        return FileMode(str(mode))
    except ValueError:
        raise ValueError(f"invalid file mode: {mode!r}") from None


def parse_write_mode(mode: "WriteMode | str") -> WriteMode:
    """Accept a WriteMode or its name (case-insensitive)."""
    if isinstance(mode, WriteMode):
        return mode
    try:
        return WriteMode[str(mode).strip().upper()]
    except KeyError:
        raise ValueError(f"invalid write mode: {mode!r}") from None

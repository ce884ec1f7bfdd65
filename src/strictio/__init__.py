"""strictio - file I/O with escalated, structured errors.

- open/close/read/write over file paths, data: URIs and open binary handles
- warnings raised during an operation become exceptions, not log noise
- every failure is one of OpenFailed, CloseFailed, ReadFailed, WriteFailed
"""

from strictio.domain.errors import (
    CloseFailed,
    ErrorKind,
    EscalatedError,
    OpenFailed,
    ReadFailed,
    SourceLocation,
    StrictIOError,
    WriteFailed,
)
from strictio.domain.modes import FileMode, WriteMode
from strictio.domain.targets import StreamContext
from strictio.infrastructure.escalation import ErrorEscalator, watch
from strictio.infrastructure.storage import (
    FileTools,
    StreamInfo,
    ToolResult,
    close_file,
    describe,
    is_closed,
    open_file,
    read,
    write,
)

__version__ = "0.1.0"

__all__ = [
    "CloseFailed",
    "ErrorEscalator",
    "ErrorKind",
    "EscalatedError",
    "FileMode",
    "FileTools",
    "OpenFailed",
    "ReadFailed",
    "SourceLocation",
    "StreamContext",
    "StreamInfo",
    "StrictIOError",
    "ToolResult",
    "WriteFailed",
    "WriteMode",
    "close_file",
    "describe",
    "is_closed",
    "open_file",
    "read",
    "watch",
    "write",
]

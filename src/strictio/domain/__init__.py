"""Domain types: error taxonomy, modes and operation targets."""

from .errors import (
    CloseFailed,
    DiagnosticCode,
    ErrorKind,
    EscalatedError,
    InvalidPathError,
    OpenFailed,
    ReadFailed,
    SourceLocation,
    StrictIOError,
    WriteFailed,
)
from .modes import FileMode, WriteMode, parse_file_mode, parse_write_mode
from .targets import HandleTarget, PathTarget, StreamContext, Target, as_target

__all__ = [
    # Errors
    "CloseFailed",
    "DiagnosticCode",
    "ErrorKind",
    "EscalatedError",
    "InvalidPathError",
    "OpenFailed",
    "ReadFailed",
    "SourceLocation",
    "StrictIOError",
    "WriteFailed",
    # Modes
    "FileMode",
    "WriteMode",
    "parse_file_mode",
    "parse_write_mode",
    # Targets
    "HandleTarget",
    "PathTarget",
    "StreamContext",
    "Target",
    "as_target",
]

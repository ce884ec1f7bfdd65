"""Domain errors.

Every failure surfaced by strictio is an ``EscalatedError``: one of four kinds
(open, close, read, write) or the generic kind produced by a bare ``watch``.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Type


class StrictIOError(Exception):
    """Base error."""
    pass


class InvalidPathError(StrictIOError, ValueError):
    """Path is empty or cannot name a file."""
    pass


class ErrorKind(Enum):
    """Kinds of escalated errors."""

    ESCALATED = "Escalated"
    OPEN_FAILED = "OpenFailed"
    CLOSE_FAILED = "CloseFailed"
    READ_FAILED = "ReadFailed"
    WRITE_FAILED = "WriteFailed"


class DiagnosticCode(IntEnum):
    """Numeric codes carried by errors escalated from warnings."""

    WARNING = 1  # Generic or user warning
    RUNTIME = 2  # RuntimeWarning, BytesWarning, UnicodeWarning, ...
    RESOURCE = 4  # ResourceWarning
    DEPRECATED = 8  # DeprecationWarning, PendingDeprecationWarning, FutureWarning

    @classmethod
    def for_category(cls, category: Type[Warning]) -> "DiagnosticCode":
        if issubclass(category, ResourceWarning):
            return cls.RESOURCE
        if issubclass(category, (DeprecationWarning, PendingDeprecationWarning, FutureWarning)):
            return cls.DEPRECATED
        if issubclass(category, (RuntimeWarning, BytesWarning, UnicodeWarning, SyntaxWarning)):
            return cls.RUNTIME
        return cls.WARNING


@dataclass(frozen=True)
class SourceLocation:
    """Where a diagnostic or fault was raised."""

    filename: str = ""
    lineno: int = 0

    def __str__(self) -> str:
        if not self.filename:
            return "<unknown>"
        return f"{self.filename}:{self.lineno}"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "SourceLocation":
        frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
        if not frames:
            return cls()
        last = frames[-1]
        return cls(filename=last.filename, lineno=last.lineno or 0)


class EscalatedError(StrictIOError):
    """A diagnostic or fault converted at the escalation boundary."""

    kind = ErrorKind.ESCALATED

    def __init__(
        self,
        message: str,
        *,
        code: int = 0,
        location: Optional[SourceLocation] = None,
        cause: Optional[BaseException] = None,
        category: Optional[Type[Warning]] = None,
    ):
        self.message = message
        self.code = int(code)
        self.location = location or SourceLocation()
        self.cause = cause
        self.category = category
        super().__init__(f"[{self.kind.value}] {message}")
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_diagnostic(
        cls,
        message: str,
        category: Type[Warning],
        filename: str,
        lineno: int,
    ) -> "EscalatedError":
        return cls(
            message,
            code=DiagnosticCode.for_category(category),
            location=SourceLocation(filename=filename, lineno=lineno),
            category=category,
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> "EscalatedError":
        if isinstance(exc, EscalatedError):
            return cls(
                exc.message,
                code=exc.code,
                location=exc.location,
                cause=exc,
                category=exc.category,
            )
        code = getattr(exc, "errno", None) or 0
        message = str(exc) or type(exc).__name__
        return cls(
            message,
            code=code if isinstance(code, int) else 0,
            location=SourceLocation.from_exception(exc),
            cause=exc,
        )


class OpenFailed(EscalatedError):
    """A handle could not be acquired."""

    kind = ErrorKind.OPEN_FAILED


class CloseFailed(EscalatedError):
    """A handle could not be released (double close, invalid handle)."""

    kind = ErrorKind.CLOSE_FAILED


class ReadFailed(EscalatedError):
    """Reading failed (invalid stream, bad descriptor, bad seek)."""

    kind = ErrorKind.READ_FAILED


class WriteFailed(EscalatedError):
    """Writing failed (read-only target, invalid stream, read-only scheme)."""

    kind = ErrorKind.WRITE_FAILED

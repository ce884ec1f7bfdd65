"""Result-returning facade over the strictio file operations.

Each method runs one operation and reports the outcome as a ``ToolResult``
instead of raising, so callers branch on ``success`` at the boundary.

Examples:
    >>> from strictio.infrastructure.storage.file_tools import FileTools
    >>> tools = FileTools()
    >>> result = tools.read("/tmp/report.bin", length=16)
    >>> if not result.success:
    ...     print(result.error.kind, result.error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from strictio.domain.errors import EscalatedError
from strictio.domain.modes import FileMode, WriteMode
from strictio.domain.targets import StreamContext
from strictio.infrastructure.storage.file_io import read, write
from strictio.infrastructure.storage.handles import close_file, describe, is_closed, open_file


@dataclass
class ToolResult:
    """Result of a file operation."""
    success: bool
    value: Any = None
    error: Optional[EscalatedError] = None

    def unwrap(self) -> Any:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        result: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            result["error"] = {
                "kind": self.error.kind.value,
                "message": self.error.message,
                "code": self.error.code,
                "location": str(self.error.location),
            }
        elif isinstance(self.value, (bytes, bytearray)):
            result["size"] = len(self.value)
        elif hasattr(self.value, "to_dict"):
            result.update(self.value.to_dict())
        elif isinstance(self.value, (bool, int, str)):
            result["value"] = self.value
        return result


def _attempt(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> ToolResult:
    try:
        return ToolResult(success=True, value=operation(*args, **kwargs))
    except EscalatedError as e:
        return ToolResult(success=False, error=e)


class FileTools:
    """File operations reporting failures as values.

    ``context`` is the default StreamContext for path-based calls.
    """

    def __init__(self, context: Optional[StreamContext] = None):
        self.context = context

    # -------------------------------------------------------------------------
    # Handle lifecycle
    # -------------------------------------------------------------------------

    def open(self, path: Any, mode: FileMode | str = FileMode.READ_IF_EXISTS) -> ToolResult:
        return _attempt(open_file, path, mode, self.context)

    def close(self, handle: Any) -> ToolResult:
        return _attempt(close_file, handle)

    def is_closed(self, handle: Any) -> bool:
        return is_closed(handle)

    def describe(self, handle: Any) -> ToolResult:
        return _attempt(describe, handle)

    # -------------------------------------------------------------------------
    # Data transfer
    # -------------------------------------------------------------------------

    def read(self, source: Any, *, offset: int = 0, length: Optional[int] = None) -> ToolResult:
        """Read bytes; ``value`` holds the data."""
        return _attempt(read, source, self.context, offset, length)

    def write(
        self,
        target: Any,
        data: Any,
        *,
        mode: WriteMode | str = WriteMode.OVERWRITE,
        offset: Optional[int] = None,
        length: Optional[int] = None,
    ) -> ToolResult:
        """Write bytes; ``value`` holds the byte count."""
        return _attempt(write, target, data, mode, offset, length, self.context)


def create_file_tools(context: Optional[StreamContext] = None) -> FileTools:
    """Factory function to create FileTools instance."""
    return FileTools(context)

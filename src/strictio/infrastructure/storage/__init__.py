"""Storage infrastructure for strictio.

Provides handle lifecycle, byte-range reads and positional writes with every
failure escalated into the strictio error taxonomy.
"""

from .path_guard import (
    is_data_uri,
    local_path,
    validate_path,
)
from .data_uri import (
    DataURI,
    DataURIStream,
    parse_data_uri,
)
from .handles import (
    StreamInfo,
    close_file,
    describe,
    is_closed,
    open_file,
)
from .file_io import (
    read,
    write,
)
from .file_tools import (
    FileTools,
    ToolResult,
    create_file_tools,
)

__all__ = [
    # Path guard
    "is_data_uri",
    "local_path",
    "validate_path",
    # Inline data
    "DataURI",
    "DataURIStream",
    "parse_data_uri",
    # Handles
    "StreamInfo",
    "close_file",
    "describe",
    "is_closed",
    "open_file",
    # File I/O
    "read",
    "write",
    # Result facade
    "FileTools",
    "ToolResult",
    "create_file_tools",
]

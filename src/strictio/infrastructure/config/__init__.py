"""Configuration helpers."""

from .settings_utils import (
    parse_bool,
    parse_int,
    parse_log_level,
    parse_permissions,
)

__all__ = [
    "parse_bool",
    "parse_int",
    "parse_log_level",
    "parse_permissions",
]

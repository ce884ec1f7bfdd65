"""Environment parsing helpers for strictio settings."""

from __future__ import annotations

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def parse_bool(value: object, *, default: bool = False) -> bool:
    """Parse a loose boolean value."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    raw = str(value).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def parse_permissions(value: object, *, default: int = 0o666) -> int:
    """Parse permission bits written as ``0o644``, ``644`` or an int."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        parsed = value
    else:
        raw = str(value).strip().lower()
        if raw.startswith("0o"):
            raw = raw[2:]
        try:
            parsed = int(raw, 8)
        except ValueError:
            return default
    if parsed < 0 or parsed > 0o7777:
        return default
    return parsed


def parse_log_level(value: object, *, default: str = "INFO") -> str:
    raw = str(value or "").strip().upper()
    if raw == "WARN":
        raw = "WARNING"
    return raw if raw in _LOG_LEVELS else default


def parse_int(
    value: object,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse an int, clamping it to ``[minimum, maximum]``."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return minimum
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed

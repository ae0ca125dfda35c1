"""Human readable formatting of measured and budget values."""

from __future__ import annotations

from enum import Enum

__all__ = ["ValueKind", "format_bytes", "format_milliseconds", "format_value"]

_BYTE_UNITS = ("B", "KB", "MB", "GB")


class ValueKind(str, Enum):
    BYTES = "bytes"
    MILLISECONDS = "ms"
    PERCENT = "percent"
    RATIO = "ratio"  # unitless score such as CLS
    RATE = "rate"  # KB/s
    COUNT = "count"


def _trim(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_bytes(num_bytes: float) -> str:
    """Format a byte count with base-1024 units (B, KB, MB, GB)."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(_BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{_trim(value)} {_BYTE_UNITS[index]}"


def format_milliseconds(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"


def format_value(kind: ValueKind, value: float) -> str:
    if kind is ValueKind.BYTES:
        return format_bytes(value)
    if kind is ValueKind.MILLISECONDS:
        return format_milliseconds(value)
    if kind is ValueKind.PERCENT:
        return f"{value:.1f}%"
    if kind is ValueKind.RATIO:
        return f"{value:.3f}"
    if kind is ValueKind.RATE:
        return f"{value:g} KB/s"
    return f"{value:g}"

"""
Duration and numeric value codecs.

Raw entry values come from forms and imports, so every helper here is total:
malformed input degrades to 0 rather than raising.
"""

from __future__ import annotations

import math
from typing import Any


def duration_to_seconds(text: Any) -> int:
    """
    Parse a strict ``HH:mm:ss`` string into seconds.

    Returns 0 for None, empty strings, the wrong number of components or
    any non-numeric component.

    Example:
        >>> duration_to_seconds("07:30:00")
        27000
        >>> duration_to_seconds("7:30")
        0
    """
    if not isinstance(text, str) or not text:
        return 0
    parts = text.split(":")
    if len(parts) != 3:
        return 0
    try:
        hours, minutes, seconds = (int(part) for part in parts)
    except ValueError:
        return 0
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_duration(total: int) -> str:
    """Format seconds as ``HH:mm:ss`` (hours may exceed 99)."""
    total = max(0, int(total))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def to_number(value: Any) -> float | None:
    """Coerce a raw value into a finite float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = float(stripped)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def number_or_zero(value: Any) -> float:
    number = to_number(value)
    return 0.0 if number is None else number


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))

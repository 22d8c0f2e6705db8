"""Translation of device date formats.

Device headers declare their date layout with .NET-style custom format
strings (``DATE_FORMAT: yyyy-MM-dd HH:mm:ss``). This module tokenizes those
strings once and uses the tokens both to build ``datetime.strptime`` patterns
and to render timestamps back in the device's own layout.
"""
from __future__ import annotations

from datetime import datetime
from functools import lru_cache

# Culture-invariant names, independent of the process locale
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_FIELD_LETTERS = frozenset("yMdHhmsfFt")

# Fallback used when the header does not declare a DATE_FORMAT (round-trip ISO-8601)
ISO_FALLBACK_FORMAT = "yyyy-MM-ddTHH:mm:ss.fffffff"


@lru_cache(maxsize=64)
def tokenize(fmt: str) -> tuple[tuple[str, str], ...]:
    """Split a custom date format into ("field", token) and ("literal", text) parts.

    Args:
        fmt: .NET-style custom date format string

    Returns:
        Tuple of (kind, value) pairs in format order
    """
    tokens: list[tuple[str, str]] = []
    i = 0
    n = len(fmt)
    while i < n:
        ch = fmt[i]
        if ch in _FIELD_LETTERS:
            j = i
            while j < n and fmt[j] == ch:
                j += 1
            tokens.append(("field", fmt[i:j]))
            i = j
        elif ch in ("'", '"'):
            end = fmt.find(ch, i + 1)
            if end < 0:
                end = n
            tokens.append(("literal", fmt[i + 1:end]))
            i = end + 1
        elif ch == "\\" and i + 1 < n:
            tokens.append(("literal", fmt[i + 1]))
            i += 2
        else:
            tokens.append(("literal", ch))
            i += 1
    return tuple(tokens)


def _strptime_directive(token: str) -> str:
    letter, width = token[0], len(token)
    if letter == "y":
        return "%Y" if width >= 3 else "%y"
    if letter == "M":
        return {4: "%B", 3: "%b"}.get(width, "%m")
    if letter == "d":
        return {4: "%A", 3: "%a"}.get(width, "%d")
    if letter == "H":
        return "%H"
    if letter == "h":
        return "%I"
    if letter == "m":
        return "%M"
    if letter == "s":
        return "%S"
    if letter in "fF":
        return "%f"
    return "%p"  # t / tt


@lru_cache(maxsize=64)
def to_strptime(fmt: str) -> str:
    """Convert a .NET-style custom date format into a strptime pattern.

    Example:
        >>> to_strptime("yyyy-MM-dd HH:mm:ss")
        '%Y-%m-%d %H:%M:%S'
    """
    parts = []
    for kind, value in tokenize(fmt):
        if kind == "field":
            parts.append(_strptime_directive(value))
        else:
            parts.append(value.replace("%", "%%"))
    return "".join(parts)


def parse_datetime(text: str, fmt: str) -> datetime:
    """Parse text with a .NET-style custom date format.

    Raises:
        ValueError: If the text does not match the format
    """
    return datetime.strptime(text.strip(), to_strptime(fmt))


def _render_field(dt: datetime, token: str) -> str:
    letter, width = token[0], len(token)
    if letter == "y":
        if width == 1:
            return str(dt.year % 100)
        if width == 2:
            return f"{dt.year % 100:02d}"
        return f"{dt.year:0{width}d}"
    if letter == "M":
        if width >= 4:
            return _MONTH_NAMES[dt.month - 1]
        if width == 3:
            return _MONTH_NAMES[dt.month - 1][:3]
        return f"{dt.month:0{width}d}"
    if letter == "d":
        if width >= 4:
            return _DAY_NAMES[dt.weekday()]
        if width == 3:
            return _DAY_NAMES[dt.weekday()][:3]
        return f"{dt.day:0{width}d}"
    if letter == "H":
        return f"{dt.hour:0{min(width, 2)}d}"
    if letter == "h":
        return f"{(dt.hour % 12) or 12:0{min(width, 2)}d}"
    if letter == "m":
        return f"{dt.minute:0{min(width, 2)}d}"
    if letter == "s":
        return f"{dt.second:0{min(width, 2)}d}"
    if letter in "fF":
        # 7 digits of fraction (100 ns ticks); datetime carries microseconds
        digits = f"{dt.microsecond:06d}0"[:width]
        return digits.rstrip("0") if letter == "F" else digits
    designator = "AM" if dt.hour < 12 else "PM"
    return designator[:width]


def format_datetime(dt: datetime, fmt: str) -> str:
    """Render a datetime using a .NET-style custom date format.

    Example:
        >>> format_datetime(datetime(2024, 1, 1, 0, 0, 0, 10000), "HH:mm:ss.fff")
        '00:00:00.010'
    """
    return "".join(
        _render_field(dt, value) if kind == "field" else value
        for kind, value in tokenize(fmt)
    )

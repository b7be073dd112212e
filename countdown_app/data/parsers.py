"""
Duration string parsing and formatting.

Administrators type durations such as ``6h``, ``90 min`` or ``45s`` into the
settings and scheduling forms. The grammar is deliberately strict: a single
number followed by an optional unit, hours when the unit is omitted.
Multi-unit strings such as ``3h 30m`` do not parse.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# Longest accepted duration or offset (100 years).
MAX_DURATION_MS = 36_525 * MS_PER_DAY

DURATION_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*"
    r"(h|hr|hrs|hours?|m|min|mins|minutes?|s|sec|secs|seconds?)?\s*$",
    re.IGNORECASE,
)

_UNIT_MS = {
    "h": MS_PER_HOUR,
    "m": MS_PER_MINUTE,
    "s": MS_PER_SECOND,
}


def parse_duration(text: Optional[str]) -> Optional[int]:
    """
    Parse a single-unit duration string into milliseconds.

    Args:
        text: Duration such as ``"6h"``, ``"1.5 hours"``, ``"90m"`` or ``"4"``

    Returns:
        Duration in milliseconds, or None when nothing could be parsed
    """
    if not isinstance(text, str):
        return None

    match = DURATION_PATTERN.match(text)
    if not match:
        return None

    number, unit = match.groups()
    multiplier = _UNIT_MS[(unit or "h")[0].lower()]

    try:
        return int(Decimal(number) * multiplier)
    except InvalidOperation:
        return None


def parse_duration_value(value: Any) -> Optional[int]:
    """
    Interpret a duration field from a command payload.

    Integers are taken as milliseconds (the wire format); strings go through
    ``parse_duration``. Anything else, and magnitudes beyond
    ``MAX_DURATION_MS``, yield None.
    """
    if isinstance(value, bool):
        return None

    ms: Optional[int] = None
    if isinstance(value, int):
        ms = value
    elif isinstance(value, float) and value.is_integer():
        ms = int(value)
    elif isinstance(value, str):
        ms = parse_duration(value)

    if ms is None or abs(ms) > MAX_DURATION_MS:
        return None
    return ms


def format_duration(ms: int) -> str:
    """
    Render a millisecond duration as compact text, e.g. ``"1h 30m"``.

    Sub-second remainders are truncated.
    """
    ms = max(0, int(ms))
    hours, rest = divmod(ms, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds = rest // MS_PER_SECOND

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")

    return " ".join(parts) if parts else "0s"

"""
Time semantics utilities for instant vs duration handling.

This module provides the injectable clock used by the service and the
helpers that convert between timezone-aware instants and integer
millisecond durations. Every elapsed-time computation in the system goes
through ``ms_between`` so that recomputation from absolute instants stays
consistent across the codebase.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Manually advanced clock for tests, scripts and replays."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = ensure_utc(start) if start is not None else EPOCH

    def now(self) -> datetime:
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = ensure_utc(instant)

    def advance(self, ms: int) -> datetime:
        """Move the clock forward by ``ms`` milliseconds and return the new instant."""
        self._now = self._now + timedelta(milliseconds=ms)
        return self._now


def ensure_utc(instant: datetime) -> datetime:
    """
    Normalize an instant to timezone-aware UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def ms_between(start: datetime, end: datetime) -> int:
    """
    Calculate the signed number of whole milliseconds from ``start`` to ``end``.

    Args:
        start: Earlier instant
        end: Later instant

    Returns:
        Milliseconds, floor-truncated (negative when end precedes start)
    """
    return (end - start) // _ONE_MS


def add_ms(instant: datetime, ms: int) -> datetime:
    """
    Shift an instant by a millisecond duration.

    Raises:
        ValueError: If the result falls outside the representable range
    """
    try:
        return instant + timedelta(milliseconds=ms)
    except OverflowError:
        raise ValueError(f"Instant out of range: {format_instant(instant)} + {ms}ms")


def from_epoch_ms(ms: int) -> datetime:
    """Build a UTC instant from milliseconds since the Unix epoch."""
    return add_ms(EPOCH, ms)


def to_epoch_ms(instant: datetime) -> int:
    """Milliseconds since the Unix epoch for a UTC instant."""
    return ms_between(EPOCH, ensure_utc(instant))


def format_instant(instant: Optional[datetime]) -> Optional[str]:
    """
    Format an instant for the wire and for audit snapshots.

    Args:
        instant: Instant to format, or None

    Returns:
        ISO8601 string with millisecond precision and a ``Z`` suffix, or None
    """
    if instant is None:
        return None
    text = ensure_utc(instant).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_instant(value: object) -> Optional[datetime]:
    """
    Parse a wire instant.

    Accepts ISO8601 strings (with or without ``Z``), epoch milliseconds and
    datetime objects. Returns None for None or an empty string.

    Raises:
        ValueError: If the value cannot be interpreted as an instant or lies
            outside the representable range
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, bool):
        raise ValueError(f"Not an instant: {value!r}")
    if isinstance(value, (int, float)):
        try:
            ms = int(value)
        except (OverflowError, ValueError):
            raise ValueError(f"Not an instant: {value!r}")
        return from_epoch_ms(ms)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))
    raise ValueError(f"Not an instant: {value!r}")

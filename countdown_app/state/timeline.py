"""
Countdown timeline engine.

Pure functions that turn a countdown record and an instant into the visible
countdown numbers, and that detect scheduled pauses which have come due.
Nothing here keeps state between calls: every value is recomputed from the
absolute instants stored on the record, so calling these once a second
forever cannot drift.
"""

from datetime import datetime
from typing import Optional

from ..data.parsers import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND
from ..utils.time import add_ms, ms_between
from .models import CountdownRecord, CountdownStatus, ScheduledPause, TimeRemaining


def _decompose(total_ms: int, elapsed_ms: int, progress_pct: float) -> TimeRemaining:
    # Floor only: the displayed second must never jump from rounding.
    return TimeRemaining(
        days=total_ms // MS_PER_DAY,
        hours=(total_ms // MS_PER_HOUR) % 24,
        minutes=(total_ms // MS_PER_MINUTE) % 60,
        seconds=(total_ms // MS_PER_SECOND) % 60,
        total_ms=total_ms,
        elapsed_ms=elapsed_ms,
        progress_pct=progress_pct,
    )


def compute_elapsed_ms(record: CountdownRecord, now: datetime) -> int:
    """
    Running time consumed by the current run, pauses excluded.

    While paused the reference instant is ``paused_at``, which freezes the
    value for the whole pause.
    """
    if record.started_at is None:
        return 0

    reference = now
    if record.status == CountdownStatus.PAUSED and record.paused_at is not None:
        reference = record.paused_at

    elapsed = ms_between(record.started_at, reference) - record.total_paused_ms
    return max(0, elapsed)


def compute_time_remaining(record: CountdownRecord, now: datetime) -> TimeRemaining:
    """
    Compute the countdown numbers shown for ``record`` at ``now``.

    Before the start command the countdown targets the scheduled
    ``start_time``. Once ended (or if ``started_at`` is missing) it is
    complete. Otherwise remaining time is the duration minus elapsed
    running time.

    Args:
        record: Countdown record
        now: Instant to evaluate at

    Returns:
        TimeRemaining with floor-truncated days/hours/minutes/seconds
    """
    if record.status == CountdownStatus.NOT_STARTED:
        total_ms = max(0, ms_between(now, record.start_time))
        return _decompose(total_ms, 0, 0.0)

    if record.status == CountdownStatus.ENDED or record.started_at is None:
        return _decompose(0, record.duration_ms, 100.0)

    elapsed_ms = compute_elapsed_ms(record, now)
    total_ms = max(0, record.duration_ms - elapsed_ms)
    progress_pct = min(100.0, max(0.0, elapsed_ms / record.duration_ms * 100))

    return _decompose(total_ms, elapsed_ms, progress_pct)


def resolve_trigger_instant(entry: ScheduledPause,
                            started_at: Optional[datetime]) -> Optional[datetime]:
    """
    Instant at which a scheduled pause becomes due.

    Offsets are measured from ``started_at``; an offset entry has no trigger
    instant before the countdown has started.
    """
    if entry.start_offset_ms is not None:
        if started_at is None:
            return None
        return add_ms(started_at, entry.start_offset_ms)
    return entry.start_time


def find_due_scheduled_pause(record: CountdownRecord,
                             now: datetime) -> Optional[ScheduledPause]:
    """
    Find the earliest unexecuted scheduled pause whose trigger has passed.

    Only a RUNNING countdown has due pauses. Invalid entries (both or
    neither trigger kinds set) are never due.
    """
    if record.status != CountdownStatus.RUNNING:
        return None

    due: Optional[ScheduledPause] = None
    due_at: Optional[datetime] = None

    for entry in record.scheduled_pauses:
        if entry.executed or not entry.is_valid:
            continue
        trigger = resolve_trigger_instant(entry, record.started_at)
        if trigger is None or trigger > now:
            continue
        if due_at is None or trigger < due_at:
            due, due_at = entry, trigger

    return due


def is_armed_pause_due(record: CountdownRecord, now: datetime) -> bool:
    """Check whether the single armed pause should fire."""
    return (
        record.status == CountdownStatus.RUNNING
        and record.scheduled_pause_at is not None
        and record.scheduled_pause_at <= now
    )


def find_expired_scheduled_pause(record: CountdownRecord,
                                 now: datetime) -> Optional[ScheduledPause]:
    """
    Find the scheduled pause currently holding the countdown once its
    planned duration has run out.
    """
    if record.status != CountdownStatus.PAUSED or record.paused_at is None:
        return None

    entry = record.get_scheduled_pause(record.active_scheduled_pause_id)
    if entry is None:
        return None

    if add_ms(record.paused_at, entry.duration_ms) <= now:
        return entry
    return None


def status_label(record: CountdownRecord) -> str:
    """Headline shown above the countdown digits."""
    if record.status == CountdownStatus.NOT_STARTED:
        return "Starting Soon"
    if record.status == CountdownStatus.PAUSED:
        reason = record.pause_reason or "Paused"
        if record.pause_prefix:
            return f"{record.pause_prefix} {reason}"
        return reason
    if record.status == CountdownStatus.ENDED:
        return "Ended"
    return "Live"

"""
Countdown data models.

This module defines the immutable data structures for the single global
countdown record, its scheduled pauses, the computed time remaining, and
the audit entries emitted for each transition.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..config.defaults import CountdownDefaults
from ..errors import StateTransitionError
from ..utils.time import add_ms, ms_between


class CountdownStatus(str, Enum):
    """Countdown lifecycle states."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


class CommandAction(str, Enum):
    """Administrative commands accepted by the transition controller."""
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESET = "reset"
    END = "end"
    UPDATE = "update"
    SCHEDULE_PAUSE = "schedule_pause"
    CANCEL_SCHEDULED_PAUSE = "cancel_scheduled_pause"


class CommandSource(str, Enum):
    """Origin of a transition, recorded on audit entries."""
    ADMIN = "admin"
    SCHEDULER = "scheduler"


@dataclass(frozen=True)
class ScheduledPause:
    """A pre-planned pause that triggers automatically once due."""

    id: str
    duration_ms: int
    reason: str = ""
    start_time: Optional[datetime] = None        # Absolute trigger instant
    start_offset_ms: Optional[int] = None        # Trigger relative to started_at
    executed: bool = False

    @property
    def is_valid(self) -> bool:
        """Exactly one trigger kind is set and the duration is positive."""
        has_time = self.start_time is not None
        has_offset = self.start_offset_ms is not None
        return has_time != has_offset and self.duration_ms > 0

    def with_executed(self, executed: bool = True) -> 'ScheduledPause':
        return replace(self, executed=executed)


@dataclass(frozen=True)
class CountdownRecord:
    """The single authoritative countdown state document."""

    event_name: str
    start_time: datetime                          # Scheduled event start (pre-start countdown)
    duration_ms: int                              # Intended running time

    # Lifecycle
    status: CountdownStatus = CountdownStatus.NOT_STARTED
    started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    pause_reason: str = ""
    pause_prefix: str = ""
    total_paused_ms: int = 0

    # Single armed pause
    scheduled_pause_at: Optional[datetime] = None
    scheduled_pause_reason: str = ""

    # Planned pauses
    scheduled_pauses: tuple[ScheduledPause, ...] = ()
    active_scheduled_pause_id: Optional[str] = None   # Entry that caused the current pause

    # Presentation (opaque pass-through)
    message: str = ""
    show_message: bool = True
    theme: dict[str, Any] = field(default_factory=dict)
    status_styles: dict[str, Any] = field(default_factory=dict)
    display: dict[str, Any] = field(default_factory=dict)
    fonts: dict[str, Any] = field(default_factory=dict)
    progress_bar: dict[str, Any] = field(default_factory=dict)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_default(cls, now: datetime,
                       defaults: Optional[CountdownDefaults] = None) -> 'CountdownRecord':
        """Build the record used when none exists yet."""
        defaults = defaults or CountdownDefaults()
        theme = defaults.theme
        return cls(
            event_name=defaults.event_name,
            start_time=add_ms(now, defaults.start_offset_ms),
            duration_ms=defaults.duration_ms,
            message=defaults.message,
            show_message=defaults.show_message,
            theme={
                "primaryColor": theme.primary_color,
                "backgroundColor": theme.background_color,
                "textColor": theme.text_color,
                "accentColor": theme.accent_color,
            },
            created_at=now,
            updated_at=now,
        )

    @property
    def is_paused(self) -> bool:
        """Compatibility mirror of ``status == PAUSED``."""
        return self.status == CountdownStatus.PAUSED

    @property
    def is_terminal(self) -> bool:
        return self.status == CountdownStatus.ENDED

    def get_scheduled_pause(self, pause_id: Optional[str]) -> Optional[ScheduledPause]:
        """Look up a scheduled pause entry by id."""
        for entry in self.scheduled_pauses:
            if entry.id == pause_id:
                return entry
        return None

    def with_started(self, timestamp: datetime) -> 'CountdownRecord':
        """Begin elapsed tracking from ``timestamp``."""
        return replace(
            self,
            status=CountdownStatus.RUNNING,
            started_at=timestamp,
            paused_at=None,
            updated_at=timestamp,
        )

    def with_paused(self, timestamp: datetime, reason: str,
                    prefix: Optional[str] = None,
                    scheduled_pause_id: Optional[str] = None) -> 'CountdownRecord':
        """Freeze the clock at ``timestamp``."""
        return replace(
            self,
            status=CountdownStatus.PAUSED,
            paused_at=timestamp,
            pause_reason=reason,
            pause_prefix=self.pause_prefix if prefix is None else prefix,
            active_scheduled_pause_id=scheduled_pause_id,
            updated_at=timestamp,
        )

    def with_resumed(self, timestamp: datetime) -> 'CountdownRecord':
        """Fold the just-ended pause into ``total_paused_ms`` and keep running."""
        if self.paused_at is None:
            raise StateTransitionError(
                "Cannot resume a record without a pause start",
                current_state=self.status.value,
                attempted_transition=CountdownStatus.RUNNING.value
            )

        pause_ms = max(0, ms_between(self.paused_at, timestamp))
        return replace(
            self,
            status=CountdownStatus.RUNNING,
            paused_at=None,
            pause_reason="",
            total_paused_ms=self.total_paused_ms + pause_ms,
            active_scheduled_pause_id=None,
            updated_at=timestamp,
        )

    def with_reset(self, timestamp: datetime) -> 'CountdownRecord':
        """Return to NOT_STARTED with all run state cleared."""
        return replace(
            self,
            status=CountdownStatus.NOT_STARTED,
            started_at=None,
            paused_at=None,
            pause_reason="",
            total_paused_ms=0,
            scheduled_pause_at=None,
            scheduled_pause_reason="",
            scheduled_pauses=tuple(entry.with_executed(False) for entry in self.scheduled_pauses),
            active_scheduled_pause_id=None,
            updated_at=timestamp,
        )

    def with_ended(self, timestamp: datetime) -> 'CountdownRecord':
        return replace(
            self,
            status=CountdownStatus.ENDED,
            paused_at=None,
            pause_reason="",
            active_scheduled_pause_id=None,
            updated_at=timestamp,
        )

    def with_armed_pause(self, at: datetime, reason: str,
                         timestamp: datetime) -> 'CountdownRecord':
        return replace(
            self,
            scheduled_pause_at=at,
            scheduled_pause_reason=reason,
            updated_at=timestamp,
        )

    def with_armed_pause_cleared(self, timestamp: datetime) -> 'CountdownRecord':
        return replace(
            self,
            scheduled_pause_at=None,
            scheduled_pause_reason="",
            updated_at=timestamp,
        )

    def with_scheduled_pause_executed(self, pause_id: str) -> 'CountdownRecord':
        """Mark one scheduled pause entry as executed."""
        return replace(
            self,
            scheduled_pauses=tuple(
                entry.with_executed() if entry.id == pause_id else entry
                for entry in self.scheduled_pauses
            ),
        )


@dataclass(frozen=True)
class TimeRemaining:
    """Visible countdown numbers for one instant."""

    days: int
    hours: int
    minutes: int
    seconds: int
    total_ms: int                # Remaining (or, before start, time until start)
    elapsed_ms: int              # Running time consumed, pauses excluded
    progress_pct: float          # 0..100


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of one state transition."""

    action: str
    timestamp: datetime
    source: CommandSource = CommandSource.ADMIN
    reason: Optional[str] = None
    performed_by: Optional[str] = None
    previous_state: Optional[dict[str, Any]] = None
    new_state: Optional[dict[str, Any]] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class CommandResult:
    """Outcome of applying one command to a record."""

    record: CountdownRecord
    changed: bool
    action: str
    source: CommandSource = CommandSource.ADMIN
    reason: Optional[str] = None

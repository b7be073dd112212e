"""
Transition controller for the countdown lifecycle.

Validates administrative commands against the current record and produces
the next record. The controller never touches a store or a clock: callers
pass in the freshly loaded record and the current instant.

Commands that are not valid for the current status are no-ops rather than
errors; only malformed input raises.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

import structlog

from ..config.defaults import CountdownDefaults
from ..data.codec import PRESENTATION_FIELDS, scheduled_pause_from_dict
from ..data.parsers import parse_duration_value
from ..errors import (
    InvalidDurationError,
    MalformedInputError,
    MissingFieldError,
    UnknownCommandError,
)
from ..logging.config import get_state_logger, log_state_transition
from ..utils.time import add_ms, parse_instant
from .models import (
    CommandAction,
    CommandResult,
    CommandSource,
    CountdownRecord,
    CountdownStatus,
    ScheduledPause,
)

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)

# Lifecycle fields an update may never write.
PROTECTED_FIELDS = frozenset({
    "status", "startedAt", "isPaused", "pausedAt", "totalPausedDuration",
    "scheduledPauseAt", "scheduledPauseReason", "activeScheduledPauseId",
    "createdAt", "updatedAt", "_id", "id",
})

# Command metadata carried alongside payload fields.
METADATA_FIELDS = frozenset({"action", "reason", "performedBy"})


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class TransitionController:
    """Applies countdown commands to a record."""

    def __init__(self, defaults: Optional[CountdownDefaults] = None):
        self.logger = logger
        self.state_logger = state_logger
        self.defaults = defaults or CountdownDefaults()
        self._handlers: dict[CommandAction, Callable[..., CountdownRecord]] = {
            CommandAction.START: self._start,
            CommandAction.PAUSE: self._pause,
            CommandAction.RESUME: self._resume,
            CommandAction.RESET: self._reset,
            CommandAction.END: self._end,
            CommandAction.UPDATE: self._update,
            CommandAction.SCHEDULE_PAUSE: self._schedule_pause,
            CommandAction.CANCEL_SCHEDULED_PAUSE: self._cancel_scheduled_pause,
        }

    def apply(
        self,
        record: CountdownRecord,
        action: str,
        payload: Optional[dict[str, Any]],
        now: datetime
    ) -> CommandResult:
        """
        Apply an administrative command.

        Args:
            record: Freshly loaded current record
            action: Command name (see CommandAction)
            payload: Command fields (reason, settings, schedule time, ...)
            now: Current instant

        Returns:
            CommandResult; ``changed`` is False for commands that were not
            valid in the current status

        Raises:
            UnknownCommandError: If the action is not a countdown command
            CountdownInputError: If the payload is malformed
        """
        try:
            command = CommandAction(action)
        except ValueError:
            raise UnknownCommandError(f"Invalid action: {action!r}", action=str(action))

        payload = payload or {}
        new_record = self._handlers[command](record, payload, now)

        return self._result(record, new_record, command.value, CommandSource.ADMIN,
                            payload.get("reason"))

    def apply_scheduled_pause(
        self,
        record: CountdownRecord,
        entry: ScheduledPause,
        now: datetime
    ) -> CommandResult:
        """Pause for a due scheduled pause entry and mark it executed."""
        if record.status != CountdownStatus.RUNNING or entry.executed:
            return self._result(record, record, CommandAction.PAUSE.value,
                                CommandSource.SCHEDULER, entry.reason)

        reason = entry.reason or self.defaults.default_pause_reason
        new_record = (
            record
            .with_paused(now, reason, scheduled_pause_id=entry.id)
            .with_scheduled_pause_executed(entry.id)
        )
        return self._result(record, new_record, CommandAction.PAUSE.value,
                            CommandSource.SCHEDULER, reason)

    def apply_armed_pause(self, record: CountdownRecord, now: datetime) -> CommandResult:
        """Pause for the single armed pause and disarm it."""
        if record.status != CountdownStatus.RUNNING or record.scheduled_pause_at is None:
            return self._result(record, record, CommandAction.PAUSE.value,
                                CommandSource.SCHEDULER, None)

        reason = record.scheduled_pause_reason or self.defaults.default_pause_reason
        new_record = record.with_paused(now, reason).with_armed_pause_cleared(now)
        return self._result(record, new_record, CommandAction.PAUSE.value,
                            CommandSource.SCHEDULER, reason)

    def apply_scheduled_resume(
        self,
        record: CountdownRecord,
        entry: ScheduledPause,
        now: datetime
    ) -> CommandResult:
        """Resume once the scheduled pause holding the countdown has run its course."""
        new_record = record
        if (record.status == CountdownStatus.PAUSED
                and record.paused_at is not None
                and record.active_scheduled_pause_id == entry.id):
            new_record = record.with_resumed(now)

        return self._result(record, new_record, CommandAction.RESUME.value,
                            CommandSource.SCHEDULER, entry.reason)

    def _result(
        self,
        previous: CountdownRecord,
        new_record: CountdownRecord,
        action: str,
        source: CommandSource,
        reason: Optional[str]
    ) -> CommandResult:
        changed = new_record != previous

        if changed:
            log_state_transition(
                self.state_logger,
                action=action,
                from_status=previous.status.value,
                to_status=new_record.status.value,
                source=source.value,
                context={"reason": reason} if reason else None
            )
        else:
            self.logger.debug(
                "Command had no effect",
                action=action,
                status=previous.status.value,
                source=source.value
            )

        return CommandResult(
            record=new_record,
            changed=changed,
            action=action,
            source=source,
            reason=reason,
        )

    def _start(self, record: CountdownRecord, payload: dict[str, Any],
               now: datetime) -> CountdownRecord:
        if record.status != CountdownStatus.NOT_STARTED:
            return record
        return record.with_started(now)

    def _pause(self, record: CountdownRecord, payload: dict[str, Any],
               now: datetime) -> CountdownRecord:
        prefix = payload.get("pausePrefix")
        if prefix is not None and not isinstance(prefix, str):
            raise MalformedInputError("pausePrefix must be a string",
                                      field="pausePrefix", value=prefix)

        if record.status != CountdownStatus.RUNNING:
            return record

        reason = payload.get("reason") or self.defaults.default_pause_reason
        return record.with_paused(now, str(reason), prefix=prefix)

    def _resume(self, record: CountdownRecord, payload: dict[str, Any],
                now: datetime) -> CountdownRecord:
        if record.status != CountdownStatus.PAUSED:
            return record

        if record.paused_at is None:
            self.logger.warning(
                "Paused record has no pause start, ignoring resume",
                status=record.status.value
            )
            return record

        return record.with_resumed(now)

    def _reset(self, record: CountdownRecord, payload: dict[str, Any],
               now: datetime) -> CountdownRecord:
        reset = record.with_reset(now)
        # Only updated_at differs when the record is already pristine.
        if replace(reset, updated_at=record.updated_at) == record:
            return record
        return reset

    def _end(self, record: CountdownRecord, payload: dict[str, Any],
             now: datetime) -> CountdownRecord:
        if record.status == CountdownStatus.ENDED:
            return record
        return record.with_ended(now)

    def _schedule_pause(self, record: CountdownRecord, payload: dict[str, Any],
                        now: datetime) -> CountdownRecord:
        at = self._resolve_schedule_time(payload, now)
        reason = payload.get("reason") or ""

        if record.status != CountdownStatus.RUNNING:
            return record

        return record.with_armed_pause(at, str(reason), now)

    def _resolve_schedule_time(self, payload: dict[str, Any], now: datetime) -> datetime:
        """Read the armed pause instant from ``at`` or a relative ``after`` duration."""
        if payload.get("at") not in (None, ""):
            try:
                at = parse_instant(payload["at"])
            except ValueError:
                raise MalformedInputError(f"Invalid schedule time: {payload['at']!r}",
                                          field="at", value=payload["at"])
        elif payload.get("after") not in (None, ""):
            after_ms = parse_duration_value(payload["after"])
            if after_ms is None or after_ms <= 0:
                raise InvalidDurationError(f"Invalid delay: {payload['after']!r}",
                                           field="after", value=payload["after"])
            try:
                at = add_ms(now, after_ms)
            except ValueError:
                raise InvalidDurationError(f"Delay out of range: {payload['after']!r}",
                                           field="after", value=payload["after"])
        else:
            raise MissingFieldError("schedule_pause requires 'at' or 'after'", field="at")

        if at < now:
            raise MalformedInputError("Scheduled pause time is in the past",
                                      field="at", value=payload.get("at"))
        return at

    def _cancel_scheduled_pause(self, record: CountdownRecord, payload: dict[str, Any],
                                now: datetime) -> CountdownRecord:
        if record.scheduled_pause_at is None:
            return record
        return record.with_armed_pause_cleared(now)

    def _merge_scheduled_pauses(self, record: CountdownRecord,
                                entries: list[Any]) -> tuple[ScheduledPause, ...]:
        """
        Validate an incoming scheduled pause list.

        Entries that already fired keep their executed flag even when the
        client resends them without it; only reset clears it.
        """
        fired = {entry.id for entry in record.scheduled_pauses if entry.executed}

        merged = []
        for raw in entries:
            entry = scheduled_pause_from_dict(raw)
            if entry.id in fired and not entry.executed:
                self.logger.info("Keeping executed flag on edited scheduled pause",
                                 pause_id=entry.id)
                entry = entry.with_executed()
            merged.append(entry)
        return tuple(merged)

    def _update(self, record: CountdownRecord, payload: dict[str, Any],
                now: datetime) -> CountdownRecord:
        """Merge editable settings; lifecycle fields are ignored."""
        changes: dict[str, Any] = {}

        for key, value in payload.items():
            if key in METADATA_FIELDS:
                continue
            if key in PROTECTED_FIELDS:
                self.logger.warning("Ignoring protected field in update", field=key)
                continue

            if key == "eventName":
                if not isinstance(value, str) or not value.strip():
                    raise MalformedInputError("eventName must be a non-empty string",
                                              field=key, value=value)
                changes["event_name"] = value
            elif key == "startTime":
                try:
                    start_time = parse_instant(value)
                except ValueError:
                    start_time = None
                if start_time is None:
                    raise MalformedInputError(f"Invalid startTime: {value!r}",
                                              field=key, value=value)
                changes["start_time"] = start_time
            elif key == "duration":
                duration_ms = parse_duration_value(value)
                if duration_ms is None or duration_ms <= 0:
                    raise InvalidDurationError(f"Invalid duration: {value!r}",
                                               field=key, value=value)
                changes["duration_ms"] = duration_ms
            elif key in ("message", "pauseReason", "pausePrefix"):
                if not isinstance(value, str):
                    raise MalformedInputError(f"{key} must be a string", field=key, value=value)
                changes[{"message": "message",
                         "pauseReason": "pause_reason",
                         "pausePrefix": "pause_prefix"}[key]] = value
            elif key == "showMessage":
                if not isinstance(value, bool):
                    raise MalformedInputError("showMessage must be a boolean",
                                              field=key, value=value)
                changes["show_message"] = value
            elif key == "scheduledPauses":
                if not isinstance(value, list):
                    raise MalformedInputError("scheduledPauses must be a list",
                                              field=key, value=value)
                changes["scheduled_pauses"] = self._merge_scheduled_pauses(record, value)
            elif key in PRESENTATION_FIELDS:
                if not isinstance(value, dict):
                    raise MalformedInputError(f"{key} must be an object", field=key, value=value)
                attr = PRESENTATION_FIELDS[key]
                changes[attr] = _deep_merge(getattr(record, attr), value)
            else:
                self.logger.warning("Ignoring unknown field in update", field=key)

        candidate = replace(record, **changes)

        if "scheduled_pauses" in changes and candidate.active_scheduled_pause_id is not None:
            if candidate.get_scheduled_pause(candidate.active_scheduled_pause_id) is None:
                candidate = replace(candidate, active_scheduled_pause_id=None)

        if candidate == record:
            return record
        return replace(candidate, updated_at=now)

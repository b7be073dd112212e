"""
Wire codec for the countdown record.

The record travels as a camelCase JSON document (the format the display and
admin clients poll) and is stored in the same shape. Instants are ISO8601
strings, durations are integer milliseconds.
"""

import copy
import uuid
from typing import Any, Optional

from ..errors import MalformedInputError, MissingFieldError
from ..state.models import (
    AuditLogEntry,
    CommandSource,
    CountdownRecord,
    CountdownStatus,
    ScheduledPause,
)
from ..utils.time import format_instant, parse_instant
from .parsers import parse_duration_value

PRESENTATION_FIELDS = {
    "theme": "theme",
    "statusStyles": "status_styles",
    "display": "display",
    "fonts": "fonts",
    "progressBar": "progress_bar",
}


def scheduled_pause_to_dict(entry: ScheduledPause) -> dict[str, Any]:
    return {
        "id": entry.id,
        "reason": entry.reason,
        "startTime": format_instant(entry.start_time),
        "startOffset": entry.start_offset_ms,
        "duration": entry.duration_ms,
        "executed": entry.executed,
    }


def scheduled_pause_from_dict(data: Any) -> ScheduledPause:
    """
    Build a validated scheduled pause from a wire entry.

    ``startOffset`` and ``duration`` accept milliseconds or duration strings.
    A missing ``id`` is generated.

    Raises:
        MalformedInputError: If the entry is not a mapping, both or neither
            trigger kinds are set, or a value cannot be parsed
        MissingFieldError: If ``duration`` is absent
    """
    if not isinstance(data, dict):
        raise MalformedInputError("Scheduled pause must be an object",
                                  field="scheduledPauses", value=data)

    raw_time = data.get("startTime")
    raw_offset = data.get("startOffset")
    has_time = raw_time not in (None, "")
    has_offset = raw_offset not in (None, "")

    if has_time == has_offset:
        raise MalformedInputError(
            "Scheduled pause needs exactly one of startTime or startOffset",
            field="scheduledPauses",
            value=data
        )

    start_time = None
    start_offset_ms = None
    if has_time:
        try:
            start_time = parse_instant(raw_time)
        except ValueError:
            raise MalformedInputError(f"Invalid scheduled pause startTime: {raw_time!r}",
                                      field="startTime", value=raw_time)
    else:
        start_offset_ms = parse_duration_value(raw_offset)
        if start_offset_ms is None or start_offset_ms < 0:
            raise MalformedInputError(f"Invalid scheduled pause startOffset: {raw_offset!r}",
                                      field="startOffset", value=raw_offset)

    if data.get("duration") in (None, ""):
        raise MissingFieldError("Scheduled pause duration is required", field="duration")

    duration_ms = parse_duration_value(data["duration"])
    if duration_ms is None or duration_ms <= 0:
        raise MalformedInputError(f"Invalid scheduled pause duration: {data['duration']!r}",
                                  field="duration", value=data["duration"])

    return ScheduledPause(
        id=str(data.get("id") or uuid.uuid4().hex),
        reason=str(data.get("reason") or ""),
        start_time=start_time,
        start_offset_ms=start_offset_ms,
        duration_ms=duration_ms,
        executed=bool(data.get("executed", False)),
    )


def record_to_dict(record: CountdownRecord) -> dict[str, Any]:
    """Serialize a record to its wire document."""
    doc: dict[str, Any] = {
        "eventName": record.event_name,
        "startTime": format_instant(record.start_time),
        "duration": record.duration_ms,
        "status": record.status.value,
        "startedAt": format_instant(record.started_at),
        "isPaused": record.is_paused,
        "pausedAt": format_instant(record.paused_at),
        "pauseReason": record.pause_reason,
        "pausePrefix": record.pause_prefix,
        "totalPausedDuration": record.total_paused_ms,
        "scheduledPauseAt": format_instant(record.scheduled_pause_at),
        "scheduledPauseReason": record.scheduled_pause_reason,
        "scheduledPauses": [scheduled_pause_to_dict(e) for e in record.scheduled_pauses],
        "activeScheduledPauseId": record.active_scheduled_pause_id,
        "message": record.message,
        "showMessage": record.show_message,
        "createdAt": format_instant(record.created_at),
        "updatedAt": format_instant(record.updated_at),
    }

    for wire_name, attr in PRESENTATION_FIELDS.items():
        doc[wire_name] = copy.deepcopy(getattr(record, attr))

    return doc


def record_from_dict(doc: dict[str, Any]) -> CountdownRecord:
    """
    Deserialize a stored wire document.

    ``isPaused`` is ignored on input; the status field is authoritative.

    Raises:
        MissingFieldError: If eventName, startTime or duration are absent
        MalformedInputError: If a field cannot be interpreted
    """
    for required in ("eventName", "startTime", "duration"):
        if doc.get(required) in (None, ""):
            raise MissingFieldError(f"Countdown document missing {required}", field=required)

    try:
        status = CountdownStatus(doc.get("status", CountdownStatus.NOT_STARTED.value))
        start_time = parse_instant(doc["startTime"])
        started_at = parse_instant(doc.get("startedAt"))
        paused_at = parse_instant(doc.get("pausedAt"))
        scheduled_pause_at = parse_instant(doc.get("scheduledPauseAt"))
        created_at = parse_instant(doc.get("createdAt"))
        updated_at = parse_instant(doc.get("updatedAt"))
    except ValueError as e:
        raise MalformedInputError(f"Malformed countdown document: {e}")

    duration_ms = parse_duration_value(doc["duration"])
    if duration_ms is None or duration_ms <= 0:
        raise MalformedInputError("Countdown duration must be positive",
                                  field="duration", value=doc["duration"])

    kwargs: dict[str, Any] = {
        attr: copy.deepcopy(doc.get(wire_name) or {})
        for wire_name, attr in PRESENTATION_FIELDS.items()
    }

    return CountdownRecord(
        event_name=str(doc["eventName"]),
        start_time=start_time,
        duration_ms=duration_ms,
        status=status,
        started_at=started_at,
        paused_at=paused_at,
        pause_reason=doc.get("pauseReason") or "",
        pause_prefix=doc.get("pausePrefix") or "",
        total_paused_ms=int(doc.get("totalPausedDuration") or 0),
        scheduled_pause_at=scheduled_pause_at,
        scheduled_pause_reason=doc.get("scheduledPauseReason") or "",
        scheduled_pauses=tuple(
            scheduled_pause_from_dict(e) for e in doc.get("scheduledPauses") or []
        ),
        active_scheduled_pause_id=doc.get("activeScheduledPauseId"),
        message=doc.get("message") or "",
        show_message=bool(doc.get("showMessage", True)),
        created_at=created_at,
        updated_at=updated_at,
        **kwargs,
    )


def audit_entry_to_dict(entry: AuditLogEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "action": entry.action,
        "timestamp": format_instant(entry.timestamp),
        "source": entry.source.value,
        "reason": entry.reason,
        "performedBy": entry.performed_by,
        "previousState": entry.previous_state,
        "newState": entry.new_state,
    }


def audit_entry_from_dict(doc: dict[str, Any], entry_id: Optional[int] = None) -> AuditLogEntry:
    return AuditLogEntry(
        id=entry_id if entry_id is not None else doc.get("id"),
        action=doc["action"],
        timestamp=parse_instant(doc["timestamp"]),
        source=CommandSource(doc.get("source", CommandSource.ADMIN.value)),
        reason=doc.get("reason"),
        performed_by=doc.get("performedBy"),
        previous_state=doc.get("previousState"),
        new_state=doc.get("newState"),
    )

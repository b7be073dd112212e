"""Tests for the countdown wire codec."""

import json

import pytest
from dataclasses import replace

from countdown_app.data.codec import (
    audit_entry_from_dict, audit_entry_to_dict, record_from_dict, record_to_dict,
    scheduled_pause_from_dict
)
from countdown_app.errors import MalformedInputError, MissingFieldError
from countdown_app.state.models import (
    AuditLogEntry, CommandSource, CountdownStatus, ScheduledPause
)
from countdown_app.utils.time import from_epoch_ms as at


class TestRecordDocument:
    """Test record serialization."""

    def test_wire_document_shape(self, one_hour_record):
        """Test camelCase keys, ISO instants and the isPaused mirror."""
        record = one_hour_record.with_started(at(0)).with_paused(at(1_500), "Lunch")

        doc = record_to_dict(record)

        assert doc["eventName"] == "Bashaway 2025"
        assert doc["startTime"] == "1970-01-02T00:00:00.000Z"
        assert doc["duration"] == 3_600_000
        assert doc["status"] == "paused"
        assert doc["isPaused"] is True
        assert doc["pausedAt"] == "1970-01-01T00:00:01.500Z"
        assert doc["pauseReason"] == "Lunch"
        assert doc["totalPausedDuration"] == 0
        assert doc["scheduledPauseAt"] is None
        assert doc["theme"]["primaryColor"] == "#EF4444"
        json.dumps(doc)

    def test_stored_document_restores_record(self, one_hour_record):
        """Test a stored document reloads into an equal record."""
        entry = ScheduledPause(id="lunch", reason="Lunch", start_offset_ms=10_800_000,
                               duration_ms=1_800_000, executed=True)
        record = (
            replace(one_hour_record, scheduled_pauses=(entry,), display={"showProgress": True})
            .with_started(at(0))
            .with_paused(at(10_800_000), "Lunch", scheduled_pause_id="lunch")
            .with_armed_pause(at(20_000_000), "Sponsor", at(10_800_000))
        )

        restored = record_from_dict(json.loads(json.dumps(record_to_dict(record))))

        assert restored == record

    def test_is_paused_ignored_on_input(self, one_hour_record):
        """Test status is authoritative over the isPaused mirror."""
        doc = record_to_dict(one_hour_record)
        doc["isPaused"] = True

        assert record_from_dict(doc).status == CountdownStatus.NOT_STARTED

    def test_serialization_copies_presentation(self, one_hour_record):
        """Test documents do not share presentation dicts with the record."""
        doc = record_to_dict(one_hour_record)
        doc["theme"]["primaryColor"] = "#000000"

        assert one_hour_record.theme["primaryColor"] == "#EF4444"

    @pytest.mark.parametrize("missing", ["eventName", "startTime", "duration"])
    def test_missing_required_fields(self, one_hour_record, missing):
        """Test required fields."""
        doc = record_to_dict(one_hour_record)
        del doc[missing]

        with pytest.raises(MissingFieldError):
            record_from_dict(doc)

    @pytest.mark.parametrize("field,value", [
        ("status", "sleeping"),
        ("startTime", "tomorrow"),
        ("duration", 0),
    ])
    def test_malformed_fields(self, one_hour_record, field, value):
        """Test uninterpretable values."""
        doc = record_to_dict(one_hour_record)
        doc[field] = value

        with pytest.raises(MalformedInputError):
            record_from_dict(doc)


class TestScheduledPauseEntry:
    """Test scheduled pause wire entries."""

    def test_offset_entry(self):
        """Test duration strings are accepted for offset and duration."""
        entry = scheduled_pause_from_dict(
            {"id": "lunch", "reason": "Lunch", "startOffset": "3h", "duration": "30m"}
        )

        assert entry == ScheduledPause(id="lunch", reason="Lunch", start_offset_ms=10_800_000,
                                       duration_ms=1_800_000)

    def test_absolute_entry_generates_id(self):
        """Test absolute entries and generated ids."""
        entry = scheduled_pause_from_dict(
            {"startTime": "1970-01-01T08:00:00Z", "duration": 60_000}
        )

        assert entry.start_time == at(28_800_000)
        assert entry.start_offset_ms is None
        assert len(entry.id) == 32
        assert entry.is_valid

    def test_missing_duration(self):
        """Test duration is required."""
        with pytest.raises(MissingFieldError):
            scheduled_pause_from_dict({"startOffset": 0})

    @pytest.mark.parametrize("data", [
        {"duration": 1_000},
        {"startOffset": 0, "startTime": "1970-01-01T00:00:00Z", "duration": 1_000},
        {"startOffset": "later", "duration": 1_000},
        {"startOffset": -1, "duration": 1_000},
        {"startTime": "noon", "duration": 1_000},
        {"startOffset": 0, "duration": "3h 30m"},
        ["startOffset", 0],
    ])
    def test_invalid_entries(self, data):
        """Test invalid entries raise."""
        with pytest.raises(MalformedInputError):
            scheduled_pause_from_dict(data)


class TestAuditEntryDocument:
    """Test audit entry serialization."""

    def test_audit_entry_document(self):
        """Test audit entries keep source, reason and snapshots."""
        entry = AuditLogEntry(
            action="pause",
            timestamp=at(5_000),
            source=CommandSource.SCHEDULER,
            reason="Lunch",
            performed_by="scheduler",
            previous_state={"status": "running"},
            new_state={"status": "paused"},
        )

        doc = audit_entry_to_dict(entry)
        restored = audit_entry_from_dict(json.loads(json.dumps(doc)), entry_id=7)

        assert doc["source"] == "scheduler"
        assert doc["timestamp"] == "1970-01-01T00:00:05.000Z"
        assert restored == replace(entry, id=7)

"""
Integration tests for complete countdown runs.

Drive the service end to end over temporary SQLite stores with a frozen
clock and check the numbers a display would show.
"""

import pytest

from countdown_app.state.models import CountdownStatus
from countdown_app.state.timeline import status_label

ONE_HOUR_MS = 3_600_000


@pytest.fixture
def one_hour_service(service):
    """Service whose countdown lasts one hour."""
    service.apply_command("update", {"duration": ONE_HOUR_MS, "eventName": "Bashaway Finals"})
    return service


class TestCountdownRun:
    """Test a full run through the service."""

    def test_half_way(self, one_hour_service):
        """Test the countdown half way through an uninterrupted hour."""
        service = one_hour_service
        service.apply_command("start")
        service.clock.advance(1_800_000)

        remaining = service.compute_time_remaining()

        assert (remaining.minutes, remaining.seconds) == (30, 0)
        assert remaining.progress_pct == 50

    def test_pause_then_overrun(self, one_hour_service):
        """Test a five minute pause is excluded and the run completes."""
        service = one_hour_service
        service.apply_command("start")
        service.clock.advance(1_800_000)
        service.apply_command("pause", {"reason": "Technical issue"})
        service.clock.advance(300_000)
        record = service.apply_command("resume")

        assert record.total_paused_ms == 300_000

        service.clock.advance(4_200_000 - 2_100_000)
        remaining = service.compute_time_remaining()

        assert remaining.elapsed_ms == 3_900_000
        assert remaining.total_ms == 0
        assert remaining.progress_pct == 100

    def test_countdown_never_increases_while_running(self, one_hour_service):
        """Test remaining time is non-increasing between ticks."""
        service = one_hour_service
        service.apply_command("start")

        previous = service.compute_time_remaining().total_ms
        for _ in range(20):
            service.clock.advance(250_000)
            current = service.compute_time_remaining().total_ms
            assert current <= previous
            previous = current

        assert previous == 0

    def test_pause_freezes_display(self, one_hour_service):
        """Test the display does not move during a pause."""
        service = one_hour_service
        service.apply_command("start")
        service.clock.advance(600_000)
        service.apply_command("pause", {"reason": "Lunch", "pausePrefix": "Back after"})
        frozen = service.compute_time_remaining()

        service.clock.advance(2_000_000)

        assert service.compute_time_remaining() == frozen
        assert status_label(service.get_current_state()) == "Back after Lunch"

    def test_resume_continues_where_paused(self, one_hour_service):
        """Test remaining time right after resume equals the frozen value."""
        service = one_hour_service
        service.apply_command("start")
        service.clock.advance(600_000)
        service.apply_command("pause")
        frozen = service.compute_time_remaining().total_ms

        service.clock.advance(900_000)
        service.apply_command("resume")

        assert service.compute_time_remaining().total_ms == frozen

    def test_reset_and_rerun(self, one_hour_service):
        """Test reset returns to a clean pre-start countdown."""
        service = one_hour_service
        service.apply_command("start")
        service.clock.advance(60_000)
        service.apply_command("pause")
        service.clock.advance(60_000)
        service.apply_command("resume")
        service.apply_command("end")

        record = service.apply_command("reset")

        assert record.status == CountdownStatus.NOT_STARTED
        assert record.total_paused_ms == 0
        assert record.started_at is None
        assert record.event_name == "Bashaway Finals"
        assert service.compute_time_remaining().progress_pct == 0

        record = service.apply_command("start")
        assert record.started_at == service.clock.now()

    def test_audit_trail(self, one_hour_service):
        """Test the audit log records every effective command, newest first."""
        service = one_hour_service
        for action in ("start", "pause", "pause", "resume", "end", "start"):
            service.apply_command(action)

        actions = [entry.action for entry in service.get_logs()]

        assert actions == ["end", "resume", "pause", "start", "update"]


class TestScheduledPauseRun:
    """Test planned pauses over a six hour event."""

    def test_lunch_break(self, service):
        """Test the lunch pause fires three hours in and is not repeated."""
        service.apply_command("update", {"duration": "6h", "scheduledPauses": [
            {"id": "lunch", "reason": "Lunch", "startOffset": 10_800_000, "duration": 1_800_000}
        ]})
        service.apply_command("start")

        service.clock.advance(10_799_000)
        assert service.tick() is None

        service.clock.advance(1_000)
        service.tick()
        record = service.get_current_state()
        assert record.status == CountdownStatus.PAUSED
        assert record.scheduled_pauses[0].executed is True
        assert status_label(record) == "Lunch"

        service.clock.advance(600_000)
        service.apply_command("resume")

        service.clock.advance(600_000)
        assert service.tick() is None

        remaining = service.compute_time_remaining()
        assert remaining.elapsed_ms == 10_800_000 + 600_000
        assert remaining.hours == 2
        assert remaining.minutes == 50

    def test_reset_rearms_planned_pause(self, service):
        """Test reset lets a planned pause fire again on the next run."""
        service.apply_command("update", {"scheduledPauses": [
            {"id": "kickoff", "reason": "Kickoff", "startOffset": 0, "duration": "5m"}
        ]})
        service.apply_command("start")
        assert service.tick().action == "pause"

        service.apply_command("reset")
        service.apply_command("start")

        assert service.tick().action == "pause"

    def test_editing_fired_pause_does_not_refire(self, service):
        """Test an admin edit of a fired pause leaves it spent."""
        service.apply_command("update", {"scheduledPauses": [
            {"id": "lunch", "reason": "Lunch", "startOffset": 0, "duration": "30m"}
        ]})
        service.apply_command("start")
        assert service.tick().action == "pause"

        service.clock.advance(60_000)
        service.apply_command("resume")
        service.apply_command("update", {"scheduledPauses": [
            {"id": "lunch", "reason": "Lunch!", "startOffset": 0, "duration": "30m"}
        ]})

        service.clock.advance(1_000)
        assert service.tick() is None

        record = service.get_current_state()
        assert record.status == CountdownStatus.RUNNING
        assert record.scheduled_pauses[0].reason == "Lunch!"
        assert record.scheduled_pauses[0].executed is True

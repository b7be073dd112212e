"""Pytest configuration and shared fixtures."""

import pytest

from countdown_app.config.defaults import get_default_config
from countdown_app.engine import CountdownService
from countdown_app.persistence.audit_store import SQLiteAuditStore
from countdown_app.persistence.record_store import SQLiteRecordStore
from countdown_app.state.models import CountdownRecord
from countdown_app.utils.time import EPOCH, FixedClock, from_epoch_ms as at

ONE_HOUR_MS = 3_600_000


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at the test epoch."""
    return FixedClock(EPOCH)


@pytest.fixture
def one_hour_record() -> CountdownRecord:
    """Not-started one hour countdown scheduled to begin a day after the epoch."""
    return CountdownRecord(
        event_name="Bashaway 2025",
        start_time=at(24 * ONE_HOUR_MS),
        duration_ms=ONE_HOUR_MS,
        message="Get ready for Bashaway!",
        theme={"primaryColor": "#EF4444", "textColor": "#FFFFFF"},
        created_at=at(0),
        updated_at=at(0),
    )


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "countdown_test.db")


@pytest.fixture
def service(db_path, clock) -> CountdownService:
    """Service over temporary SQLite stores with a frozen clock."""
    return CountdownService(
        record_store=SQLiteRecordStore(db_path),
        audit_store=SQLiteAuditStore(db_path),
        clock=clock,
        config=get_default_config(),
    )

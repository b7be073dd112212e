"""
Countdown service coordinator.

Wires the transition controller and timeline engine to the record store,
the audit store and the clock. Every command follows the same path:
load the current record → apply the command → save → append an audit
entry → return the new record.
"""

from typing import Any, Optional

import structlog

from .config.defaults import DefaultConfig, get_default_config
from .data.codec import record_to_dict
from .errors import PersistenceError, StoreUnavailableError
from .logging.config import get_scheduler_logger
from .persistence.base import AuditStore, RecordStore
from .state.models import (
    AuditLogEntry,
    CommandResult,
    CountdownRecord,
    TimeRemaining,
)
from .state.timeline import (
    compute_time_remaining,
    find_due_scheduled_pause,
    find_expired_scheduled_pause,
    is_armed_pause_due,
)
from .state.transitions import TransitionController
from .utils.time import Clock, SystemClock

logger = structlog.get_logger(__name__)
scheduler_logger = get_scheduler_logger(__name__)


class CountdownService:
    """
    Main coordinator for the countdown.

    Commands are not serialized: two admins issuing commands at the same
    moment each read, compute and write, and the store keeps the last write.
    """

    def __init__(
        self,
        record_store: RecordStore,
        audit_store: AuditStore,
        clock: Optional[Clock] = None,
        config: Optional[DefaultConfig] = None
    ) -> None:
        self.logger = logger
        self.scheduler_logger = scheduler_logger
        self.record_store = record_store
        self.audit_store = audit_store
        self.clock = clock or SystemClock()
        self.config = config or get_default_config()
        self.controller = TransitionController(self.config.countdown)

    def get_current_state(self) -> CountdownRecord:
        """
        Read the current record, creating it from defaults on first use.

        Store failures degrade to an unsaved default record instead of
        raising, so displays keep rendering.
        """
        now = self.clock.now()

        try:
            record = self.record_store.load()
            if record is None:
                record = self.record_store.save(self._default_record())
                self.logger.info("Created default countdown", event_name=record.event_name)
            return record
        except PersistenceError as e:
            self.logger.error(
                "Record store unavailable, serving defaults",
                error=str(e),
                operation=e.operation
            )
            return CountdownRecord.create_default(now, self.config.countdown)

    def apply_command(
        self,
        action: str,
        payload: Optional[dict[str, Any]] = None,
        performed_by: Optional[str] = None
    ) -> CountdownRecord:
        """
        Apply an administrative command and persist the result.

        Args:
            action: start, pause, resume, reset, end, update, schedule_pause
                or cancel_scheduled_pause
            payload: Command fields
            performed_by: Who issued the command, for the audit log

        Returns:
            The record after the command (unchanged if it was a no-op)

        Raises:
            StoreUnavailableError: If the record could not be loaded or saved
            CountdownInputError: If the command or payload is malformed
        """
        previous, created = self._load_for_command(action)
        result = self.controller.apply(previous, action, payload, self.clock.now())

        if created and not result.changed:
            # The lazily created record is stored even when the command is a no-op.
            return self._save(result.record, action)
        return self._commit(previous, result, performed_by)

    def compute_time_remaining(self, record: Optional[CountdownRecord] = None) -> TimeRemaining:
        """Countdown numbers for ``record`` (default: current record) at the clock's now."""
        if record is None:
            record = self.get_current_state()
        return compute_time_remaining(record, self.clock.now())

    def get_logs(self, limit: Optional[int] = None) -> list[AuditLogEntry]:
        """
        Most recent audit entries, newest first, capped at the configured limit.

        Read failures return an empty list.
        """
        cap = self.config.audit.retrieval_limit
        limit = cap if limit is None else max(0, min(limit, cap))

        try:
            return self.audit_store.recent(limit)
        except PersistenceError as e:
            self.logger.error("Failed to fetch audit log", error=str(e))
            return []

    def tick(self) -> Optional[CommandResult]:
        """
        Run one poll of the scheduled pause checks.

        In order: the armed single pause, the earliest due planned pause,
        then auto-resume of a planned pause whose duration has elapsed. At
        most one transition is applied per tick.

        Returns:
            The applied CommandResult, or None when nothing was due
        """
        previous, _ = self._load_for_command("tick")
        now = self.clock.now()

        due_entry = find_due_scheduled_pause(previous, now)
        expired_entry = None
        if self.config.scheduler.auto_resume:
            expired_entry = find_expired_scheduled_pause(previous, now)

        if is_armed_pause_due(previous, now):
            result = self.controller.apply_armed_pause(previous, now)
        elif due_entry is not None:
            result = self.controller.apply_scheduled_pause(previous, due_entry, now)
        elif expired_entry is not None:
            result = self.controller.apply_scheduled_resume(previous, expired_entry, now)
        else:
            return None

        self._commit(previous, result, performed_by="scheduler")

        self.scheduler_logger.info(
            "Scheduled transition applied",
            action=result.action,
            at=now,
            reason=result.reason,
            status=result.record.status.value
        )
        return result

    def _default_record(self) -> CountdownRecord:
        return CountdownRecord.create_default(self.clock.now(), self.config.countdown)

    def _load_for_command(self, action: str) -> tuple[CountdownRecord, bool]:
        """Load the record, building it from defaults if missing."""
        try:
            record = self.record_store.load()
        except PersistenceError as e:
            raise StoreUnavailableError(f"Cannot load countdown for {action}: {e}",
                                        operation="load")

        if record is None:
            self.logger.info("No countdown stored, using defaults", action=action)
            return self._default_record(), True
        return record, False

    def _save(self, record: CountdownRecord, action: str) -> CountdownRecord:
        try:
            return self.record_store.save(record)
        except PersistenceError as e:
            raise StoreUnavailableError(f"Cannot save countdown after {action}: {e}",
                                        operation="save")

    def _commit(
        self,
        previous: CountdownRecord,
        result: CommandResult,
        performed_by: Optional[str]
    ) -> CountdownRecord:
        if not result.changed:
            return previous

        saved = self._save(result.record, result.action)
        self._append_audit(previous, saved, result, performed_by)
        return saved

    def _append_audit(
        self,
        previous: CountdownRecord,
        new_record: CountdownRecord,
        result: CommandResult,
        performed_by: Optional[str]
    ) -> None:
        """
        Best-effort audit write; failures never undo the transition.

        The log is trimmed to ``audit.max_entries`` after each append.
        """
        entry = AuditLogEntry(
            action=result.action,
            timestamp=self.clock.now(),
            source=result.source,
            reason=result.reason,
            performed_by=performed_by or self.config.audit.performed_by,
            previous_state=record_to_dict(previous),
            new_state=record_to_dict(new_record),
        )

        try:
            self.audit_store.append(entry)
            if self.config.audit.max_entries:
                self.audit_store.prune(self.config.audit.max_entries)
        except Exception as e:
            self.logger.error(
                "Failed to save audit entry",
                action=result.action,
                error=str(e),
                error_type=type(e).__name__
            )


def build_service(
    config: Optional[DefaultConfig] = None,
    clock: Optional[Clock] = None
) -> CountdownService:
    """Create a service backed by the SQLite stores named in ``config``."""
    from .persistence.audit_store import SQLiteAuditStore
    from .persistence.record_store import SQLiteRecordStore

    config = config or get_default_config()
    storage = config.storage

    return CountdownService(
        record_store=SQLiteRecordStore(storage.db_path, storage.timeout_seconds),
        audit_store=SQLiteAuditStore(storage.db_path, storage.timeout_seconds),
        clock=clock,
        config=config,
    )

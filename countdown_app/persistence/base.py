"""Store interfaces consumed by the countdown service."""

from typing import Optional, Protocol

from ..state.models import AuditLogEntry, CountdownRecord


class RecordStore(Protocol):
    """Read/write-one-document store for the countdown record."""

    def load(self) -> Optional[CountdownRecord]:
        """Return the current record, or None if none has been saved."""
        ...

    def save(self, record: CountdownRecord) -> CountdownRecord:
        """Persist the record, creating it if absent, and return what was stored."""
        ...


class AuditStore(Protocol):
    """Append-only audit log."""

    def append(self, entry: AuditLogEntry) -> None:
        ...

    def recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """Most recent entries, newest first."""
        ...

    def prune(self, keep: int) -> int:
        """Evict all but the ``keep`` most recent entries; return how many went."""
        ...

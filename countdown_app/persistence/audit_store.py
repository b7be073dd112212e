"""Append-only audit log persistence."""

import sqlite3

import orjson

from ..data.codec import audit_entry_from_dict, audit_entry_to_dict
from ..errors import AuditLogError
from ..state.models import AuditLogEntry
from ..utils.time import format_instant
from .sqlite import SQLiteStoreBase


class SQLiteAuditStore(SQLiteStoreBase):
    """SQLite-based audit trail of countdown transitions."""

    def __init__(self, db_path: str = "countdown.db", timeout_seconds: float = 30.0):
        super().__init__(db_path, timeout_seconds)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS audit_log (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        action TEXT NOT NULL,
                        source TEXT NOT NULL,
                        timestamp TEXT NOT NULL,
                        entry TEXT NOT NULL
                    )
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_audit_log_timestamp ON audit_log(timestamp)
                """)

                conn.commit()
        except sqlite3.Error as e:
            raise AuditLogError(f"Failed to initialize audit store: {e}",
                                operation="init", target=str(self.db_path))

    def append(self, entry: AuditLogEntry) -> None:
        """
        Append one audit entry.

        Raises:
            AuditLogError: If the write fails
        """
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO audit_log (action, source, timestamp, entry)
                    VALUES (?, ?, ?, ?)
                """, (
                    entry.action,
                    entry.source.value,
                    format_instant(entry.timestamp),
                    orjson.dumps(audit_entry_to_dict(entry)).decode("utf-8"),
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise AuditLogError(f"Failed to append audit entry: {e}",
                                operation="append", target=str(self.db_path))

    def recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """
        Get the most recent audit entries, newest first.

        Raises:
            AuditLogError: If the read fails
        """
        try:
            with self._get_connection() as conn:
                rows = conn.execute("""
                    SELECT id, entry FROM audit_log
                    ORDER BY timestamp DESC, id DESC LIMIT ?
                """, (limit,)).fetchall()
        except sqlite3.Error as e:
            raise AuditLogError(f"Failed to read audit log: {e}",
                                operation="recent", target=str(self.db_path))

        return [audit_entry_from_dict(orjson.loads(row["entry"]), entry_id=row["id"])
                for row in rows]

    def prune(self, keep: int = 50) -> int:
        """
        Evict the oldest entries, keeping the ``keep`` most recent.

        Returns:
            Number of entries deleted
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    DELETE FROM audit_log WHERE id NOT IN (
                        SELECT id FROM audit_log ORDER BY timestamp DESC, id DESC LIMIT ?
                    )
                """, (keep,))
                conn.commit()
                deleted_count = cursor.rowcount
        except sqlite3.Error as e:
            raise AuditLogError(f"Failed to prune audit log: {e}",
                                operation="prune", target=str(self.db_path))

        if deleted_count:
            self.logger.info("Pruned audit log", deleted=deleted_count, kept=keep)
        return deleted_count

"""SQLite persistence for the single countdown record."""

import sqlite3
from datetime import datetime, timezone
from typing import Optional

import orjson

from ..data.codec import record_from_dict, record_to_dict
from ..errors import CountdownInputError, PersistenceError
from ..state.models import CountdownRecord
from .sqlite import SQLiteStoreBase

RECORD_KEY = "current"


class SQLiteRecordStore(SQLiteStoreBase):
    """
    Stores the countdown as one JSON document under a fixed key.

    Each save replaces the whole document; concurrent writers resolve by
    last write wins.
    """

    def __init__(self, db_path: str = "countdown.db", timeout_seconds: float = 30.0):
        super().__init__(db_path, timeout_seconds)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS countdown (
                        key TEXT PRIMARY KEY,
                        document TEXT NOT NULL,
                        saved_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to initialize record store: {e}",
                                   operation="init", target=str(self.db_path))

    def load(self) -> Optional[CountdownRecord]:
        """
        Load the current countdown record.

        Returns:
            The stored record, or None if nothing has been saved yet

        Raises:
            PersistenceError: If the database is unreachable or the stored
                document is corrupt
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT document FROM countdown WHERE key = ?", (RECORD_KEY,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load countdown: {e}",
                                   operation="load", target=str(self.db_path))

        if row is None:
            return None

        try:
            return record_from_dict(orjson.loads(row["document"]))
        except (ValueError, CountdownInputError) as e:
            raise PersistenceError(f"Stored countdown document is corrupt: {e}",
                                   operation="load", target=str(self.db_path))

    def save(self, record: CountdownRecord) -> CountdownRecord:
        """
        Replace the stored countdown record.

        Raises:
            PersistenceError: If the write fails
        """
        document = orjson.dumps(record_to_dict(record)).decode("utf-8")
        saved_at = datetime.now(timezone.utc).isoformat()

        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO countdown (key, document, saved_at)
                    VALUES (?, ?, ?)
                """, (RECORD_KEY, document, saved_at))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save countdown: {e}",
                                   operation="save", target=str(self.db_path))

        self.logger.debug("Countdown saved", status=record.status.value)
        return record

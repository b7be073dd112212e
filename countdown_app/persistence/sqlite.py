"""Shared SQLite connection handling for the countdown stores."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import structlog

logger = structlog.get_logger(__name__)


class SQLiteStoreBase:
    """Opens a short-lived connection per operation."""

    def __init__(self, db_path: Union[str, Path] = "countdown.db", timeout_seconds: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds
        self.logger = logger

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise
        finally:
            if conn:
                conn.close()

"""
Recovery strategy classifications for error handling.

These categories tell callers of the service what to do next: retry the
command or surface the failure.
"""

from typing import Optional


class RecoverableError(Exception):
    """Mixin for errors that can be recovered from by retrying."""

    def __init__(self, message: str, retry_count: int = 0,
                 max_retries: int = 3, **kwargs):
        super().__init__(message)
        self.retry_count = retry_count
        self.max_retries = max_retries
        self.recoverable = True


class StoreUnavailableError(RecoverableError):
    """The record store failed while a command was being applied."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation

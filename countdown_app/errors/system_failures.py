"""
System failure error classifications.

These exceptions represent failures of the collaborators around the core
(record store, audit store) or a corrupted transition.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for collaborator and integrity failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """A transition would break a record invariant."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class AuditLogError(PersistenceError):
    """The audit log could not be written or read."""

"""
Error classification system for countdown command handling.

This module provides a structured exception hierarchy for the kinds of
failures the countdown core distinguishes: malformed administrative input,
store and audit failures, and their recovery characteristics.
"""

from .input_errors import (
    CountdownInputError,
    MalformedInputError,
    MissingFieldError,
    UnknownCommandError,
    InvalidDurationError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    PersistenceError,
    AuditLogError,
)
from .recovery import (
    RecoverableError,
    StoreUnavailableError,
)

__all__ = [
    # Input Errors
    "CountdownInputError",
    "MalformedInputError",
    "MissingFieldError",
    "UnknownCommandError",
    "InvalidDurationError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "PersistenceError",
    "AuditLogError",
    # Recovery Categories
    "RecoverableError",
    "StoreUnavailableError",
]

"""
Input error classifications for administrative commands.

These exceptions are raised before any state is mutated, so the record the
command was applied to is always left unchanged.
"""

from typing import Any, Optional


class CountdownInputError(Exception):
    """Base class for rejected command input."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MalformedInputError(CountdownInputError):
    """A field is present but in an unusable format."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class MissingFieldError(CountdownInputError):
    """A field required by the command is absent."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class UnknownCommandError(CountdownInputError):
    """The requested action is not a countdown command."""

    def __init__(self, message: str, action: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.action = action


class InvalidDurationError(MalformedInputError):
    """A duration string did not parse or a duration was not positive."""

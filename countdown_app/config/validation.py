"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_countdown_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate countdown default parameters."""
        errors = []

        if "duration_ms" in params:
            value = params["duration_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="duration_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        if "start_offset_ms" in params:
            value = params["start_offset_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="start_offset_ms",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "event_name" in params:
            value = params["event_name"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="event_name",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "show_message" in params:
            value = params["show_message"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="show_message",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_scheduler_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate scheduler parameters."""
        errors = []

        if "poll_interval_seconds" in params:
            value = params["poll_interval_seconds"]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="poll_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "auto_resume" in params:
            value = params["auto_resume"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="auto_resume",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_audit_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate audit log parameters."""
        errors = []

        if "retrieval_limit" in params:
            value = params["retrieval_limit"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="retrieval_limit",
                    message="Must be a positive integer",
                    value=value
                ))

        if "max_entries" in params:
            value = params["max_entries"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="max_entries",
                    message="Must be a non-negative integer",
                    value=value
                ))
            elif (isinstance(params.get("retrieval_limit"), int)
                  and 0 < value < params["retrieval_limit"]):
                errors.append(ValidationError(
                    field="max_entries",
                    message="Must be 0 or at least retrieval_limit",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_auth_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate admin secret parameters."""
        errors = []

        if "admin_secret_key" in params:
            value = params["admin_secret_key"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="admin_secret_key",
                    message="Must be a non-empty string",
                    value="<redacted>"
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "countdown" in config:
            errors.extend(ConfigValidator.validate_countdown_params(config["countdown"]))

        if "scheduler" in config:
            errors.extend(ConfigValidator.validate_scheduler_params(config["scheduler"]))

        if "audit" in config:
            errors.extend(ConfigValidator.validate_audit_params(config["audit"]))

        if "auth" in config:
            errors.extend(ConfigValidator.validate_auth_params(config["auth"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors

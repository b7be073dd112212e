"""
Centralized logging configuration for the countdown service.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration so state transitions, scheduler ticks and store failures
share one structured format.
"""
import logging
import sys
from datetime import datetime
from typing import Any, MutableMapping, Optional

import structlog
from structlog.types import FilteringBoundLogger

from ..utils.time import format_instant


def render_instants(
    logger: Any,
    method_name: str,
    event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """
    Render datetime values the way the countdown wire format does.

    Log lines then carry the same ``...T00:00:00.000Z`` instants that the
    stored record and the audit snapshots use.
    """
    for key, value in event_dict.items():
        if isinstance(value, datetime):
            event_dict[key] = format_instant(value)
    return event_dict


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        render_instants,
    ]

    # Timestamps use the same UTC ISO form as countdown instants
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    # Add caller information if requested
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    # Add any extra processors
    if extra_processors:
        processors.extend(extra_processors)

    # Add final formatting processor
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for countdown state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound with the state machine subsystem context
    """
    return get_logger(name).bind(
        subsystem="state_machine",
        audit_trail=True
    )


def get_scheduler_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for the scheduled pause poller.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound with the scheduler subsystem context
    """
    return get_logger(name).bind(subsystem="scheduler")


def log_state_transition(
    logger: FilteringBoundLogger,
    action: str,
    from_status: str,
    to_status: str,
    source: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a countdown state transition with standardized format.

    Args:
        logger: Structlog logger instance
        action: Command that caused the transition
        from_status: Status before the command
        to_status: Status after the command
        source: Who issued the command ("admin" or "scheduler")
        context: Additional context data
    """
    bound_logger = logger.bind(
        action=action,
        from_status=from_status,
        to_status=to_status,
        source=source,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")

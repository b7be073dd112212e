"""Static shared-secret check for administrative access."""

import hmac
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


def verify_admin_key(candidate: Optional[str], secret: str) -> bool:
    """
    Check an admin key against the configured shared secret.

    Args:
        candidate: Key supplied by the client (may be None or empty)
        secret: Configured admin secret

    Returns:
        True only for an exact match
    """
    if not candidate or not secret:
        return False

    valid = hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))
    if not valid:
        logger.warning("Admin key rejected")
    return valid

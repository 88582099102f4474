"""Ownership checks shared by posts, media and comments."""

import logging

from src.errors import ForbiddenError, NotFoundError

# Configure logging
logger = logging.getLogger(__name__)


def require_owner(record, caller_id: str, not_found: str, forbidden: str):
    """
    Enforce that a fetched record exists and belongs to the caller.

    Existence is checked before ownership, so a missing record is always
    reported as not found regardless of who asks.

    Args:
        record: Row returned by the lookup, or None
        caller_id: Authenticated user id
        not_found: Detail for the not-found error
        forbidden: Detail for the forbidden error

    Returns:
        The record, unchanged

    Raises:
        NotFoundError: If record is None
        ForbiddenError: If record.author_id differs from caller_id
    """
    if record is None:
        logger.warning(not_found)
        raise NotFoundError(not_found)

    if record.author_id != caller_id:
        logger.warning(f"User {caller_id} denied access to {type(record).__name__} {record.id}")
        raise ForbiddenError(forbidden)

    return record

"""Domain errors raised by the service layer and translated to HTTP responses."""

import functools
import logging

from fastapi import status

# Configure logging
logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Base class for every error the API reports to clients."""

    status_code = status.HTTP_400_BAD_REQUEST
    headers = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(BlogAPIError):
    """Malformed input, or a storage failure surfaced as a message."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(BlogAPIError):
    """Bad credentials or a missing/invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(BlogAPIError):
    """Authenticated caller is not the owner of the record."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BlogAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BlogAPIError):
    """Duplicate email or username."""

    status_code = status.HTTP_409_CONFLICT


def service_errors(fallback_message: str):
    """
    Decorate a service function so that callers only ever see BlogAPIError.

    Domain errors are re-raised unchanged. Anything else is logged and
    replaced with a ValidationError carrying fallback_message.

    Args:
        fallback_message: Detail used for unexpected failures

    Returns:
        Callable: Decorator
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except BlogAPIError:
                raise
            except Exception as e:
                logger.error(f"{func.__qualname__} failed: {e}")
                raise ValidationError(fallback_message) from e
        return wrapper
    return decorator

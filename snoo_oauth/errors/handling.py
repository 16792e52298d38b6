from __future__ import annotations

import logging

from ..logs import logger
from .internal import (
    AccessTokenExpiredError,
    ConfigurationError,
    InternalError,
    NetworkError,
    NotAuthenticatedError,
    OAuthError,
    ParsingError,
)

# Keyword names consumed by log_event itself
_RESERVED_KEYS = (
    "domain",
    "action",
    "level",
    "human",
    "exc_info",
    "client",
    "error_type",
    "message",
)


def classify_error(error: BaseException) -> str:
    """Return a short category name used for structured error logging."""
    if isinstance(error, NetworkError | OSError | ConnectionError | TimeoutError):
        return "network"
    if isinstance(error, OAuthError):
        return "oauth"
    if isinstance(error, AccessTokenExpiredError):
        return "expired"
    if isinstance(error, NotAuthenticatedError):
        return "auth"
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, object] | None = None,
    level: int = logging.ERROR,
    client: str | None = None,
) -> None:
    """Log an error message with the associated exception details.

    The error is categorized and emitted as an ``error/logged`` event so the
    structured logger renders it consistently with other events. The error
    is not consumed; callers re-raise after logging.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level (default: ERROR).
        client: Optional client id used as log prefix.
    """
    extra = dict(context or {})
    if isinstance(error, InternalError) and error.data:
        for key, value in error.data.items():
            extra.setdefault(key, value)
    for key in _RESERVED_KEYS:
        extra.pop(key, None)
    logger.log_event(
        "error",
        "logged",
        level=level,
        client=client,
        error_type=classify_error(error),
        message=f"{message}: {type(error).__name__}: {error}",
        **extra,
    )


__all__ = ["classify_error", "log_error"]

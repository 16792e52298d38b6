"""Error hierarchy and error logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    AccessTokenExpiredError,
    ConfigurationError,
    InternalError,
    NetworkError,
    NotAuthenticatedError,
    OAuthError,
    ParsingError,
)

__all__ = [
    "InternalError",
    "ConfigurationError",
    "NetworkError",
    "ParsingError",
    "OAuthError",
    "NotAuthenticatedError",
    "AccessTokenExpiredError",
    "classify_error",
    "log_error",
]

"""OAuth2 authentication core for Reddit-style REST API clients."""

from .calls import AuthenticatedCaller  # noqa: F401
from .config import AuthMode, Credentials, Duration, ServerConfig  # noqa: F401
from .errors import (  # noqa: F401
    AccessTokenExpiredError,
    ConfigurationError,
    InternalError,
    NetworkError,
    NotAuthenticatedError,
    OAuthError,
    ParsingError,
)
from .http import Request  # noqa: F401
from .oauth import AuthEvent, OAuthEngine, TokenKind  # noqa: F401
from .rate import Throttle  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "AuthenticatedCaller",
    "AuthMode",
    "Credentials",
    "Duration",
    "ServerConfig",
    "AccessTokenExpiredError",
    "ConfigurationError",
    "InternalError",
    "NetworkError",
    "NotAuthenticatedError",
    "OAuthError",
    "ParsingError",
    "Request",
    "AuthEvent",
    "OAuthEngine",
    "TokenKind",
    "Throttle",
]

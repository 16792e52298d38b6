"""OAuth2 token lifecycle: grants, authorize URLs, token state, events."""

from .auth_url import build_auth_url  # noqa: F401
from .engine import OAuthEngine  # noqa: F401
from .grants import (  # noqa: F401
    GrantData,
    app_only_token_data,
    authenticated_token_data,
    refresh_token_data,
)
from .notifications import AuthEvent, NotificationChannel  # noqa: F401
from .tokens import TokenKind, TokenStore  # noqa: F401

__all__ = [
    "OAuthEngine",
    "TokenKind",
    "TokenStore",
    "AuthEvent",
    "NotificationChannel",
    "GrantData",
    "build_auth_url",
    "app_only_token_data",
    "authenticated_token_data",
    "refresh_token_data",
]

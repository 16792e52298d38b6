"""In-memory token state owned by a single engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..constants import INVALID_TOKEN


class TokenKind(str, Enum):
    """Kind of token exchange performed against the token endpoint.

    Attributes:
        EXPLICIT: Authorization code for tokens.
        SCRIPT: Username/password for tokens.
        APP_ONLY: Application credentials for an app-only token.
        REFRESH: Refresh token for a new access token.
    """

    EXPLICIT = "explicit"
    SCRIPT = "script"
    APP_ONLY = "app_only"
    REFRESH = "refresh"


@dataclass
class TokenStore:
    """Current access/refresh tokens and their validity flags.

    Invariant: ``access_token_valid`` implies ``access_token`` is a real
    token, never the ``INVALID_TOKEN`` sentinel. No timestamps are kept;
    expiry is detected from server responses.

    Attributes:
        access_token: Current access token or the ``INVALID_TOKEN`` sentinel.
        refresh_token: Refresh token, if one is held.
        access_token_valid: Whether ``access_token`` may be used.
        token_type: Token type reported by the server.
        application_only: Whether the access token carries no user context.
    """

    access_token: str = INVALID_TOKEN
    refresh_token: str | None = None
    access_token_valid: bool = False
    token_type: str = "bearer"
    application_only: bool = False

    @property
    def has_access_token(self) -> bool:
        return self.access_token_valid

    @property
    def has_refresh_token(self) -> bool:
        return self.refresh_token is not None

    def commit_access_token(
        self,
        token: str,
        *,
        token_type: str = "bearer",
        application_only: bool = False,
    ) -> None:
        if not isinstance(token, str) or not token or token == INVALID_TOKEN:
            raise ValueError("access token must be a non-empty string")
        self.access_token = token
        self.token_type = (token_type or "bearer").lower()
        self.application_only = application_only
        self.access_token_valid = True

    def commit_refresh_token(self, token: str) -> None:
        if not isinstance(token, str) or not token:
            raise ValueError("refresh token must be a non-empty string")
        self.refresh_token = token

    def invalidate_access_token(self) -> None:
        """Drop the access token; a held refresh token survives."""
        self.access_token = INVALID_TOKEN
        self.access_token_valid = False
        self.application_only = False
        self.token_type = "bearer"

    def clear(self) -> None:
        self.invalidate_access_token()
        self.refresh_token = None

    def authorization_header(self) -> str:
        # Always well-formed so callers can build the header unconditionally
        token = self.access_token if self.access_token_valid else INVALID_TOKEN
        return f"bearer {token}"

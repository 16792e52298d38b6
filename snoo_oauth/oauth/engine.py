"""OAuth2 engine: token acquisition, refresh, revocation for four app types."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..config import AuthMode, Credentials, Duration, ServerConfig
from ..constants import ACCESS_TOKEN_PATH, REVOKE_TOKEN_PATH
from ..errors.internal import (
    ConfigurationError,
    NotAuthenticatedError,
    OAuthError,
    ParsingError,
)
from ..http import Request
from ..logs import logger
from . import grants
from .auth_url import build_auth_url
from .notifications import AuthEvent, Listener, NotificationChannel
from .tokens import TokenKind, TokenStore


class OAuthEngine:
    """Drive every OAuth2 exchange for one application instance.

    Each engine owns its :class:`TokenStore`; nothing is shared between
    instances. A session moves to another engine only by handing over the
    refresh token value (``other.refresh(token)``).

    Every network exchange is routed through the injected
    :class:`~snoo_oauth.http.Request`, so token calls share the request
    layer's throttle with ordinary API calls.
    """

    def __init__(
        self,
        credentials: Credentials,
        request: Request,
        servers: ServerConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            credentials: Application credentials and mode.
            request: Throttled transport used for every exchange.
            servers: Hosts to talk to (defaults from constants).
        """
        self.credentials = credentials
        self.request = request
        self.servers = servers or ServerConfig()
        # Normalized once: comma form for the authorize URL
        self.scope = credentials.url_scope
        self.tokens = TokenStore()
        self.notifications = NotificationChannel(owner=credentials.client_id)
        # Single-flight refresh, keyed by refresh token value
        self._refresh_inflight: dict[str, asyncio.Task[None]] = {}

    @property
    def mode(self) -> AuthMode:
        return self.credentials.mode

    def on(self, event: AuthEvent | str, listener: Listener) -> Callable[[], None]:
        """Subscribe to a lifecycle event; returns an unsubscribe callable."""
        return self.notifications.subscribe(event, listener)

    # --------------------------- Token state --------------------------- #
    def has_access_token(self) -> bool:
        return self.tokens.has_access_token

    def has_refresh_token(self) -> bool:
        return self.tokens.has_refresh_token

    def has_user_session(self) -> bool:
        """True when the held access token acts on behalf of a user."""
        return self.tokens.has_access_token and not self.tokens.application_only

    def get_access_token(self) -> str | None:
        return self.tokens.access_token if self.tokens.has_access_token else None

    def get_refresh_token(self) -> str | None:
        return self.tokens.refresh_token

    def set_access_token(self, token: str) -> None:
        """Inject a known access token without a network exchange."""
        self.tokens.commit_access_token(token)

    def set_refresh_token(self, token: str) -> None:
        """Inject a known refresh token without a network exchange."""
        self.tokens.commit_refresh_token(token)

    def get_authorization_header(self) -> str:
        return self.tokens.authorization_header()

    def can_refresh_access_token(self) -> bool:
        """Whether a new access token can be obtained without the user.

        Script apps can always re-run the password grant; explicit apps need
        a held refresh token. Implicit and app-only sessions cannot.
        """
        if self.mode is AuthMode.SCRIPT:
            return True
        if self.mode is AuthMode.EXPLICIT:
            return self.tokens.has_refresh_token
        return False

    # --------------------------- URL / grant data --------------------------- #
    def get_explicit_auth_url(self, state: str | None = None) -> str:
        return build_auth_url(self.credentials, self.servers, AuthMode.EXPLICIT, state)

    def get_implicit_auth_url(self, state: str | None = None) -> str:
        return build_auth_url(self.credentials, self.servers, AuthMode.IMPLICIT, state)

    def get_auth_url(self, state: str | None = None) -> str:
        """Authorize URL for the configured redirect flow.

        Raises:
            ConfigurationError: For script and application-only apps.
        """
        builders = {
            AuthMode.EXPLICIT: self.get_explicit_auth_url,
            AuthMode.IMPLICIT: self.get_implicit_auth_url,
        }
        builder = builders.get(self.mode)
        if builder is None:
            raise ConfigurationError(
                f"{self.mode.value} apps have no authorization redirect",
                data={"mode": self.mode.value},
            )
        return builder(state)

    def get_app_only_token_data(self) -> grants.GrantData:
        return grants.app_only_token_data(self.credentials)

    def get_authenticated_token_data(
        self, authorization_code: str | None = None
    ) -> grants.GrantData:
        return grants.authenticated_token_data(self.credentials, authorization_code)

    def get_refresh_token_data(self, refresh_token: str) -> grants.GrantData:
        return grants.refresh_token_data(self.credentials, refresh_token)

    def _grant_data(
        self,
        kind: TokenKind,
        authorization_code: str | None,
        refresh_token: str | None,
    ) -> grants.GrantData:
        kind = TokenKind(kind)
        if kind is TokenKind.APP_ONLY:
            return self.get_app_only_token_data()
        if kind is TokenKind.REFRESH:
            return self.get_refresh_token_data(refresh_token or "")
        # SCRIPT / EXPLICIT must match the configured app type
        if kind.value != self.mode.value:
            raise ConfigurationError(
                f"{kind.value} token requested for a {self.mode.value} app",
                data={"mode": self.mode.value},
            )
        return self.get_authenticated_token_data(authorization_code)

    # --------------------------- Exchanges --------------------------- #
    async def get_token(
        self,
        kind: TokenKind,
        *,
        authorization_code: str | None = None,
        refresh_token: str | None = None,
    ) -> dict[str, Any]:
        """POST a grant to the token endpoint and return the raw response.

        Server-reported ``{"error": ...}`` payloads are returned as-is; nothing
        is committed to the token state here.

        Args:
            kind: Exchange to perform.
            authorization_code: Code for ``TokenKind.EXPLICIT``.
            refresh_token: Token for ``TokenKind.REFRESH``.

        Raises:
            ConfigurationError: If the kind does not fit the configured mode.
            NetworkError: On transport failure.
            ParsingError: If the response is not a JSON object.
        """
        data = self._grant_data(kind, authorization_code, refresh_token)
        logger.log_event(
            "oauth",
            "token_exchange",
            level=logging.DEBUG,
            client=self.credentials.client_id,
            grant_type=data["grant_type"],
        )
        return await self.request.post(
            self.servers.www_url(ACCESS_TOKEN_PATH), data, auth=self._basic_auth()
        )

    async def _exchange(self, kind: TokenKind, **args: Any) -> dict[str, Any]:
        payload = await self.get_token(kind, **args)
        self._raise_for_error(payload, kind.value)
        if not isinstance(payload.get("access_token"), str) or not payload["access_token"]:
            raise ParsingError(
                "Missing access_token in token response", data={"grant": kind.value}
            )
        return payload

    def _raise_for_error(self, payload: dict[str, Any], operation: str) -> None:
        if "error" not in payload:
            return
        error = payload["error"]
        logger.log_event(
            "oauth",
            "server_error",
            level=logging.WARNING,
            client=self.credentials.client_id,
            error=error,
            grant_type=operation,
        )
        detail = payload.get("error_description") or payload.get("message")
        message = f"OAuth server error: {error}" + (f" ({detail})" if detail else "")
        raise OAuthError(error, message=message, data={"operation": operation})

    def _basic_auth(self) -> tuple[str, str]:
        return (self.credentials.client_id, self.credentials.client_secret)

    async def application_only_auth(self) -> None:
        """Obtain and commit an application-only token (no refresh token)."""
        payload = await self._exchange(TokenKind.APP_ONLY)
        self.tokens.commit_access_token(
            payload["access_token"],
            token_type=payload.get("token_type", "bearer"),
            application_only=True,
        )
        logger.log_event("oauth", "app_only_auth", client=self.credentials.client_id)

    async def auth(
        self, code_or_token: str | None = None, app_only: bool = False
    ) -> str | None:
        """Authenticate according to the configured app type.

        Args:
            code_or_token: Authorization code (explicit) or access token
                (implicit). Ignored for script and application-only auth.
            app_only: Force the application-only flow regardless of mode.

        Returns:
            The refresh token for explicit apps with permanent duration,
            otherwise None.

        Raises:
            ConfigurationError: Missing code/token or unsupported mode.
            OAuthError: Rejected by the authorization server.
            NetworkError: On transport failure.
        """
        if app_only or self.mode is AuthMode.APP_ONLY:
            await self.application_only_auth()
            return None
        flow = self._AUTH_FLOWS.get(self.mode)
        if flow is None:
            raise ConfigurationError(
                f"unsupported app type {self.mode.value}", data={"mode": self.mode.value}
            )
        return await flow(self, code_or_token)

    async def _auth_script(self, _unused: str | None) -> None:
        payload = await self._exchange(TokenKind.SCRIPT)
        self.tokens.commit_access_token(
            payload["access_token"], token_type=payload.get("token_type", "bearer")
        )
        logger.log_event(
            "oauth", "auth_success", client=self.credentials.client_id, mode=self.mode.value
        )
        return None

    async def _auth_explicit(self, code: str | None) -> str | None:
        if not code:
            raise ConfigurationError("explicit auth requires an authorization code")
        payload = await self._exchange(TokenKind.EXPLICIT, authorization_code=code)
        refresh_token = None
        if self.credentials.duration is Duration.PERMANENT:
            issued = payload.get("refresh_token")
            refresh_token = issued if isinstance(issued, str) and issued else None
        self.tokens.commit_access_token(
            payload["access_token"], token_type=payload.get("token_type", "bearer")
        )
        if refresh_token:
            self.tokens.commit_refresh_token(refresh_token)
        logger.log_event(
            "oauth",
            "auth_success",
            client=self.credentials.client_id,
            mode=self.mode.value,
            duration=self.credentials.duration.value,
        )
        return refresh_token

    async def _auth_implicit(self, access_token: str | None) -> None:
        if not access_token:
            raise ConfigurationError("implicit auth requires the redirect's access token")
        # The browser already performed the exchange
        self.tokens.commit_access_token(access_token)
        logger.log_event("oauth", "implicit_token_set", client=self.credentials.client_id)
        return None

    _AUTH_FLOWS: dict[AuthMode, Callable[[OAuthEngine, str | None], Awaitable[str | None]]] = {
        AuthMode.SCRIPT: _auth_script,
        AuthMode.EXPLICIT: _auth_explicit,
        AuthMode.IMPLICIT: _auth_implicit,
    }

    async def refresh(self, refresh_token: str | None = None) -> None:
        """Exchange a refresh token for a new access token.

        Uses ``refresh_token`` when given, else the stored one. Concurrent
        calls with the same token share one exchange and one notification.

        Raises:
            NotAuthenticatedError: No refresh token supplied or stored.
            OAuthError: The server rejected the token; state is unchanged.
            NetworkError: On transport failure.
        """
        token = refresh_token or self.tokens.refresh_token
        if not token:
            raise NotAuthenticatedError("No refresh token set.")

        task = self._refresh_inflight.get(token)
        if task is None:
            task = asyncio.create_task(self._refresh(token))
            self._refresh_inflight[token] = task
            task.add_done_callback(lambda t, key=token: self._forget_refresh(key, t))
        else:
            logger.log_event(
                "oauth", "refresh_joined", level=logging.DEBUG, client=self.credentials.client_id
            )
        # Shield so one cancelled waiter does not cancel the shared exchange
        await asyncio.shield(task)

    def _forget_refresh(self, token: str, task: asyncio.Task[None]) -> None:
        if self._refresh_inflight.get(token) is task:
            del self._refresh_inflight[token]
        if task.cancelled():
            return
        # Mark retrieved; every waiter re-raises it through the shield
        task.exception()

    async def _refresh(self, refresh_token: str) -> None:
        try:
            payload = await self._exchange(TokenKind.REFRESH, refresh_token=refresh_token)
        except OAuthError as e:
            logger.log_event(
                "oauth",
                "refresh_failed",
                level=logging.WARNING,
                client=self.credentials.client_id,
                error=e.error,
            )
            raise
        issued = payload.get("refresh_token")
        new_refresh = issued if isinstance(issued, str) and issued else refresh_token
        self.tokens.commit_access_token(
            payload["access_token"], token_type=payload.get("token_type", "bearer")
        )
        self.tokens.commit_refresh_token(new_refresh)
        logger.log_event("oauth", "refresh_success", client=self.credentials.client_id)
        # Listeners may start a new refresh with the same token
        if self._refresh_inflight.get(refresh_token) is asyncio.current_task():
            del self._refresh_inflight[refresh_token]
        await self.notifications.emit(
            AuthEvent.ACCESS_TOKEN_REFRESHED, self.tokens.access_token
        )

    async def deauth(self, refresh_token: str | None = None) -> None:
        """Revoke a token at the authorization server.

        Without an argument the current access token is revoked and only the
        access state is cleared; a held refresh token survives. With a
        refresh token, that token is revoked and all token state is cleared.

        Raises:
            OAuthError: The server rejected the revocation; state is unchanged.
            NetworkError: On transport failure.
        """
        is_refresh = bool(refresh_token)
        if is_refresh:
            token = refresh_token
        elif self.tokens.has_access_token:
            token = self.tokens.access_token
        else:
            logger.log_event(
                "oauth", "deauth_skipped", level=logging.DEBUG, client=self.credentials.client_id
            )
            return
        hint = "refresh_token" if is_refresh else "access_token"
        payload = await self.request.post(
            self.servers.www_url(REVOKE_TOKEN_PATH),
            {"token": token, "token_type_hint": hint},
            auth=self._basic_auth(),
        )
        self._raise_for_error(payload, "revoke")
        if is_refresh:
            self.tokens.clear()
        else:
            self.tokens.invalidate_access_token()
        logger.log_event(
            "oauth", "deauth", client=self.credentials.client_id, token_type_hint=hint
        )

"""Authorized API calls with expiry detection and one transparent renewal."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from ..config import AuthMode
from ..constants import ACCESS_TOKEN_EXPIRED_MESSAGE, USER_REQUIRED_MESSAGE
from ..errors.handling import log_error
from ..errors.internal import AccessTokenExpiredError, InternalError, NotAuthenticatedError
from ..http import HttpResponse, Request
from ..logs import logger
from ..oauth.engine import OAuthEngine
from ..oauth.notifications import AuthEvent

# Status the API uses to report an expired or revoked access token
EXPIRED_STATUS = 401


class _SessionRenewed(Exception):
    """Raised inside an attempt after a successful renewal to trigger the retry."""


class AuthenticatedCaller:
    """Send API calls to the oauth host with the engine's Authorization header.

    A 401 response is treated as an expired token: ``access_token_expired``
    is emitted, the session is renewed once when the engine can do so, and
    the call is retried once. Renewal failures propagate unchanged.
    """

    def __init__(self, engine: OAuthEngine, request: Request | None = None) -> None:
        self.engine = engine
        self.request = request or engine.request

    def _renewal(self) -> tuple[str, Callable[[], Awaitable[Any]]] | None:
        """Pick how the current session can be renewed, if at all."""
        engine = self.engine
        if engine.tokens.application_only:
            return "application_only_auth", engine.application_only_auth
        if engine.mode is AuthMode.SCRIPT:
            return "auth", engine.auth
        if engine.mode is AuthMode.EXPLICIT and engine.has_refresh_token():
            return "refresh", engine.refresh
        return None

    async def _ensure_token(self, requires_user: bool) -> None:
        if requires_user:
            if not self.engine.has_user_session():
                raise NotAuthenticatedError(USER_REQUIRED_MESSAGE)
            return
        if not self.engine.has_access_token():
            logger.log_event(
                "call", "app_only_fallback", client=self.engine.credentials.client_id
            )
            await self.engine.application_only_auth()

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        requires_user: bool = False,
    ) -> Any:
        """Perform one API call and return its decoded JSON body.

        Args:
            method: HTTP method.
            path: API path on the oauth host (e.g. ``/api/v1/me``).
            params: Query string parameters.
            data: Form body.
            requires_user: Whether the endpoint acts on behalf of a user.

        Raises:
            NotAuthenticatedError: A user session is required but not held.
            AccessTokenExpiredError: The token expired and could not be renewed
                within the single allowed attempt.
            NetworkError: On transport failure.
        """
        await self._ensure_token(requires_user)
        url = self.engine.servers.oauth_url(path)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(2),
            retry=retry_if_exception_type(_SessionRenewed),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self.request.send(
                    method,
                    url,
                    params=params,
                    data=data,
                    headers={"Authorization": self.engine.get_authorization_header()},
                )
                if response.status != EXPIRED_STATUS:
                    return response.data
                await self._handle_expired(
                    response, path, first=attempt.retry_state.attempt_number == 1
                )
        # AsyncRetrying either returns from the block or reraises
        raise AccessTokenExpiredError(ACCESS_TOKEN_EXPIRED_MESSAGE)  # pragma: no cover

    async def _handle_expired(self, response: HttpResponse, path: str, *, first: bool) -> None:
        client = self.engine.credentials.client_id
        rejected = self.engine.tokens.access_token
        logger.log_event(
            "call",
            "token_expired",
            level=logging.WARNING,
            client=client,
            status=response.status,
            path=path,
        )
        await self.engine.notifications.emit(AuthEvent.ACCESS_TOKEN_EXPIRED, rejected)
        if first and self.engine.has_access_token() and self.engine.tokens.access_token != rejected:
            # A listener already renewed the session
            logger.log_event("call", "renewed_by_listener", level=logging.DEBUG, client=client)
            raise _SessionRenewed()
        renewal = self._renewal() if first else None
        if renewal is None:
            raise AccessTokenExpiredError(
                ACCESS_TOKEN_EXPIRED_MESSAGE, data={"path": path, "status": response.status}
            )
        strategy, renew = renewal
        logger.log_event("call", "reauth", client=client, strategy=strategy)
        try:
            await renew()
        except InternalError as e:
            log_error(
                "Session renewal failed",
                e,
                {"strategy": strategy, "path": path},
                level=logging.WARNING,
                client=client,
            )
            raise
        raise _SessionRenewed()

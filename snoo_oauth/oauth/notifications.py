"""Observer channel for token lifecycle events."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from ..logs import logger

Listener = Callable[[Any], Awaitable[None] | None]


class AuthEvent(str, Enum):
    """Lifecycle events observable on an engine.

    Attributes:
        ACCESS_TOKEN_REFRESHED: Emitted after ``refresh()`` commits; payload
            is the new access token.
        ACCESS_TOKEN_EXPIRED: Emitted by the call layer when an API call
            reports an expired token; payload is the rejected access token.
            Also subscribable as ``auth_token_expired``.
    """

    ACCESS_TOKEN_REFRESHED = "access_token_refreshed"
    ACCESS_TOKEN_EXPIRED = "access_token_expired"

    @classmethod
    def _missing_(cls, value):
        # Older name of the expiry event
        if value == "auth_token_expired":
            return cls.ACCESS_TOKEN_EXPIRED
        return None


class NotificationChannel:
    """Explicit listener registration and ordered delivery.

    Listeners run sequentially in registration order, each at most once per
    emission. Plain callables and coroutine functions are both accepted. A
    failing listener is logged and does not stop delivery to the others.
    """

    def __init__(self, owner: str | None = None) -> None:
        self.owner = owner
        self._listeners: dict[AuthEvent, list[Listener]] = {}

    def subscribe(self, event: AuthEvent | str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``event``.

        Listeners are additive; registering the same callable twice delivers
        twice.

        Returns:
            A callable that removes this registration.
        """
        key = AuthEvent(event)
        lst = self._listeners.setdefault(key, [])
        lst.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.get(key, []).remove(listener)
            except ValueError:
                pass  # already removed

        return unsubscribe

    def listener_count(self, event: AuthEvent | str) -> int:
        return len(self._listeners.get(AuthEvent(event), []))

    async def emit(self, event: AuthEvent | str, payload: Any = None) -> int:
        """Deliver ``payload`` to every listener of ``event``.

        Returns:
            Number of listeners that completed without error.
        """
        key = AuthEvent(event)
        # Snapshot so listeners may unsubscribe during delivery
        listeners = list(self._listeners.get(key, []))
        if not listeners:
            return 0
        logger.log_event(
            "notify",
            "emit",
            level=logging.DEBUG,
            client=self.owner,
            event=key.value,
            listeners=len(listeners),
        )
        delivered = 0
        for listener in listeners:
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "notify",
                    "listener_error",
                    level=logging.WARNING,
                    client=self.owner,
                    event=key.value,
                    error=f"{type(e).__name__}: {e}",
                )
        return delivered

"""Minimum-interval throttle shared by every outgoing request."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..constants import THROTTLE_MS
from ..logs import logger

T = TypeVar("T")


class Throttle:
    """Gate outgoing calls to at most one per ``throttle_ms`` milliseconds.

    Calls issued faster than the interval queue on an ``asyncio.Lock`` and are
    released in arrival order. Token exchanges and API calls go through the
    same instance so they share one rate budget.
    """

    def __init__(
        self,
        throttle_ms: int = THROTTLE_MS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if throttle_ms < 0:
            raise ValueError("throttle_ms must be >= 0")
        self.interval = throttle_ms / 1000
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_release: float | None = None
        # Counters
        self.calls = 0
        self.delayed_calls = 0

    def snapshot(self) -> dict[str, object]:
        """Return a serializable snapshot of throttle state for debugging."""
        since_last = (
            None
            if self._last_release is None
            else max(0.0, self._clock() - self._last_release)
        )
        return {
            "interval": self.interval,
            "calls": self.calls,
            "delayed_calls": self.delayed_calls,
            "since_last": since_last,
            "queued": self._lock.locked(),
        }

    def _delay(self) -> float:
        if self._last_release is None:
            return 0.0
        return max(0.0, self.interval - (self._clock() - self._last_release))

    async def wait(self, endpoint: str = "default") -> None:
        """Wait until the next call slot is free, then claim it.

        Args:
            endpoint: URL or label of the call (for logging only).
        """
        async with self._lock:
            delay = self._delay()
            if delay > 0:
                self.delayed_calls += 1
                logger.log_event(
                    "throttle",
                    "wait",
                    level=logging.DEBUG,
                    delay=round(delay, 3),
                    endpoint=endpoint,
                )
                await self._sleep(delay)
            self._last_release = self._clock()
            self.calls += 1

    async def run(self, operation: Callable[[], Awaitable[T]], endpoint: str = "default") -> T:
        """Claim a call slot and run ``operation``."""
        await self.wait(endpoint)
        return await operation()

"""Throttled aiohttp transport used for token exchanges and API calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from ..constants import REQUEST_TIMEOUT_SECONDS, USER_AGENT
from ..errors.internal import NetworkError, ParsingError
from ..logs import logger
from ..rate import Throttle


@dataclass
class HttpResponse:
    """Decoded response of a single HTTP call.

    Attributes:
        status: HTTP status code.
        data: Decoded JSON body (None for empty bodies).
        headers: Response headers.
    """

    status: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)


class Request:
    """Perform HTTP calls through a shared :class:`Throttle`.

    Transport failures are wrapped into :class:`NetworkError`; bodies that
    are not JSON raise :class:`ParsingError`. Non-2xx statuses below 500 are
    returned to the caller, since OAuth and API errors travel in the body.
    """

    def __init__(
        self,
        throttle: Throttle | None = None,
        session: aiohttp.ClientSession | None = None,
        *,
        user_agent: str = USER_AGENT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the request layer.

        Args:
            throttle: Shared throttle; a default one is created when omitted.
            session: aiohttp session to use. When omitted one is created on
                first use and closed by :meth:`close`.
            user_agent: User-Agent header sent with every call.
            timeout: Total timeout in seconds for each call.
        """
        self.throttle = throttle or Throttle()
        self.user_agent = user_agent
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        # Injected sessions belong to the caller
        if not self._owns_session or self._session is None:
            return
        if not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> Request:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()

    async def send(
        self,
        method: str,
        url: str,
        *,
        data: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> HttpResponse:
        """Send one request after claiming a throttle slot.

        Args:
            method: HTTP method.
            url: Absolute URL.
            data: Form body (sent url-encoded).
            params: Query string parameters.
            headers: Extra headers (e.g. Authorization).
            auth: ``(login, password)`` pair sent as HTTP basic auth.

        Returns:
            HttpResponse with decoded JSON body.

        Raises:
            NetworkError: On connection failures, timeouts and 5xx statuses.
            ParsingError: When the body is not JSON.
        """
        await self.throttle.wait(url)
        hdrs = {"User-Agent": self.user_agent}
        if headers:
            hdrs.update(headers)
        if auth:
            hdrs["Authorization"] = aiohttp.encode_basic_auth(auth[0], auth[1])
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        logger.log_event("http", "request", level=logging.DEBUG, method=method, url=url)
        try:
            async with self.session.request(
                method,
                url,
                data=data,
                params=params,
                headers=hdrs,
                timeout=timeout,
            ) as resp:
                status = resp.status
                resp_headers = dict(resp.headers)
                if status >= 500:
                    logger.log_event(
                        "http", "server_error", level=logging.WARNING, status=status, url=url
                    )
                    raise NetworkError(
                        f"HTTP {status} from {url}", data={"status": status, "url": url}
                    )
                body = await self._decode(resp, url)
        except TimeoutError as e:
            self._log_failure(method, url, e)
            raise NetworkError(f"Request timeout: {method} {url}", data={"url": url}) from e
        except aiohttp.ClientError as e:
            self._log_failure(method, url, e)
            raise NetworkError(
                f"Network error during {method} {url}: {e}", data={"url": url}
            ) from e
        return HttpResponse(status=status, data=body, headers=resp_headers)

    async def post(
        self,
        url: str,
        data: dict[str, str],
        auth: tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a form body and return the decoded JSON object.

        Empty bodies (e.g. from the revoke endpoint) decode to ``{}``.
        """
        response = await self.send("POST", url, data=data, auth=auth, headers=headers)
        if response.data is None:
            return {}
        if not isinstance(response.data, dict):
            raise ParsingError(
                f"Expected a JSON object from {url}",
                data={"status": response.status, "url": url},
            )
        return response.data

    @staticmethod
    async def _decode(resp: Any, url: str) -> Any:
        if resp.status == 204:
            return None
        try:
            # content_type=None: servers label error bodies inconsistently
            return await resp.json(content_type=None)
        except ValueError as e:
            logger.log_event(
                "http", "invalid_json", level=logging.WARNING, status=resp.status, url=url
            )
            raise ParsingError(
                f"Invalid JSON in response from {url}",
                data={"status": resp.status, "url": url},
            ) from e

    @staticmethod
    def _log_failure(method: str, url: str, error: BaseException) -> None:
        logger.log_event(
            "http",
            "request_failed",
            level=logging.WARNING,
            method=method,
            url=url,
            error=type(error).__name__,
        )

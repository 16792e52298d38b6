"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the OAuth engine and the
call layer. Raw aiohttp / JSON errors never escape the transport; they are
wrapped into one of these first.

Classes:
  InternalError            – Base for all internal errors.
  ConfigurationError       – Operation incompatible with the configured mode.
  NetworkError             – Transport failure (connection, timeout, 5xx).
  ParsingError             – Response body is not the expected JSON.
  OAuthError               – Error payload reported by the authorization server.
  NotAuthenticatedError    – No token available for the requested operation.
  AccessTokenExpiredError  – API call kept failing with an expired token.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigurationError(InternalError):
    """Exception raised when an operation does not fit the configured mode.

    Examples are requesting an authorization URL for an application-only
    client, or running the code exchange without an authorization code.
    Never retried.
    """


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    Includes connection failures, timeouts and server-side (5xx) failures.
    Propagated unchanged to the caller; the engine does not retry.
    """


class ParsingError(InternalError):
    """Exception raised when a response body cannot be decoded as JSON."""


class OAuthError(InternalError):
    """Exception raised for an error payload returned by the authorization server.

    Attributes:
        error: The server-reported error code (e.g. ``invalid_grant``).
    """

    def __init__(
        self,
        error: object,
        *,
        message: str | None = None,
        data: Mapping[str, object] | None = None,
    ) -> None:
        self.error = str(error)
        super().__init__(message or f"OAuth server error: {self.error}", data=data)


class NotAuthenticatedError(InternalError):
    """Exception raised when there is no token to perform the operation with."""


class AccessTokenExpiredError(InternalError):
    """Exception raised when an API call reports an expired token and the
    session could not be renewed within the single allowed attempt."""


__all__ = [
    "InternalError",
    "ConfigurationError",
    "NetworkError",
    "ParsingError",
    "OAuthError",
    "NotAuthenticatedError",
    "AccessTokenExpiredError",
]

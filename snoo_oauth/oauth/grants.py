"""Token-endpoint form bodies, one builder per application type.

Each public function dispatches on ``Credentials.mode`` through a mapping and
raises ConfigurationError for modes the grant does not support.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import AuthMode, Credentials
from ..constants import DEVICE_ID_PLACEHOLDER, INSTALLED_CLIENT_GRANT
from ..errors.internal import ConfigurationError

GrantData = dict[str, str]


def _client_credentials_grant(credentials: Credentials) -> GrantData:
    return {
        "grant_type": "client_credentials",
        "scope": credentials.token_scope,
    }


def _installed_client_grant(credentials: Credentials) -> GrantData:
    return {
        "grant_type": INSTALLED_CLIENT_GRANT,
        "device_id": DEVICE_ID_PLACEHOLDER,
        "scope": credentials.token_scope,
    }


def _password_grant(credentials: Credentials, _code: str | None) -> GrantData:
    return {
        "grant_type": "password",
        "username": credentials.username or "",
        "password": credentials.password or "",
        "scope": credentials.token_scope,
    }


def _authorization_code_grant(credentials: Credentials, code: str | None) -> GrantData:
    if not code:
        raise ConfigurationError(
            "explicit mode requires an authorization code",
            data={"mode": credentials.mode.value},
        )
    return {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": credentials.client_id,
        "redirect_uri": credentials.redirect_uri or "",
        "scope": credentials.token_scope,
    }


_APP_ONLY_BUILDERS: dict[AuthMode, Callable[[Credentials], GrantData]] = {
    AuthMode.SCRIPT: _client_credentials_grant,
    AuthMode.EXPLICIT: _client_credentials_grant,
    AuthMode.IMPLICIT: _installed_client_grant,
    AuthMode.APP_ONLY: _installed_client_grant,
}

_AUTHENTICATED_BUILDERS: dict[AuthMode, Callable[[Credentials, str | None], GrantData]] = {
    AuthMode.SCRIPT: _password_grant,
    AuthMode.EXPLICIT: _authorization_code_grant,
}


def app_only_token_data(credentials: Credentials) -> GrantData:
    """Build the grant body for an application-only token.

    Apps holding a secret (script / explicit) use ``client_credentials``;
    installed and app-only clients use the installed-client grant with a
    placeholder device id.
    """
    builder = _APP_ONLY_BUILDERS.get(credentials.mode)
    if builder is None:
        raise ConfigurationError(
            f"application-only grant unsupported for mode {credentials.mode.value}",
            data={"mode": credentials.mode.value},
        )
    return builder(credentials)


def authenticated_token_data(
    credentials: Credentials, authorization_code: str | None = None
) -> GrantData:
    """Build the grant body for a user session (password or code grant)."""
    builder = _AUTHENTICATED_BUILDERS.get(credentials.mode)
    if builder is None:
        raise ConfigurationError(
            f"user token grant unsupported for mode {credentials.mode.value}",
            data={"mode": credentials.mode.value},
        )
    return builder(credentials, authorization_code)


def refresh_token_data(credentials: Credentials, refresh_token: str) -> GrantData:
    if not refresh_token:
        raise ConfigurationError("refresh token grant requires a refresh token")
    return {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "scope": credentials.token_scope,
    }

"""Authorization redirect URL construction."""

from __future__ import annotations

import secrets
import urllib.parse

from ..config import AuthMode, Credentials, ServerConfig
from ..constants import AUTHORIZE_PATH
from ..errors.internal import ConfigurationError

# response_type per redirect flow; other modes have no browser redirect
_RESPONSE_TYPES: dict[AuthMode, str] = {
    AuthMode.EXPLICIT: "code",
    AuthMode.IMPLICIT: "token",
}

# Characters encodeURIComponent leaves unescaped beyond the always-safe set
_COMPONENT_SAFE = "!*'()"


def _quote_component(
    value: str, safe: str = "", encoding: str | None = None, errors: str | None = None
) -> str:
    return urllib.parse.quote(value, safe=_COMPONENT_SAFE, encoding=encoding, errors=errors)


def build_auth_url(
    credentials: Credentials,
    servers: ServerConfig,
    mode: AuthMode,
    state: str | None = None,
) -> str:
    """Build the authorize URL for the explicit (code) or implicit (token) flow.

    Args:
        credentials: Application credentials; ``mode`` must match.
        servers: Hosts to build the URL against.
        mode: Flow to build for (EXPLICIT or IMPLICIT).
        state: CSRF token echoed back by the server. A random one is
            generated when omitted.

    Returns:
        The full authorize URL with percent-encoded query values.

    Raises:
        ConfigurationError: If the flow has no redirect or the credentials
            are configured for a different mode.
    """
    response_type = _RESPONSE_TYPES.get(mode)
    if response_type is None or credentials.mode is not mode:
        raise ConfigurationError(
            f"no {mode.value} authorization URL for a {credentials.mode.value} app",
            data={"mode": credentials.mode.value},
        )

    params = {
        "client_id": credentials.client_id,
        "response_type": response_type,
        "state": state if state is not None else secrets.token_urlsafe(16),
        "redirect_uri": credentials.redirect_uri or "",
    }
    if mode is AuthMode.EXPLICIT:
        params["duration"] = credentials.duration.value
    params["scope"] = credentials.url_scope

    path = AUTHORIZE_PATH + (".compact" if credentials.mobile_friendly else "")
    query = urllib.parse.urlencode(params, quote_via=_quote_component)
    return f"{servers.www_url(path)}?{query}"

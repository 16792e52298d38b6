"""
Configuration constants for the snoo-oauth client.

Tunables can be overridden through environment variables of the same name
(``SNOO_*``); an unparsable value logs a warning and keeps the default.
Protocol constants (grant URIs, sentinels, endpoint paths) are fixed.
"""

import logging
import os
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def _from_env(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logging.warning(
            f"Invalid {cast.__name__} value for {name}='{raw}', using default {default}"
        )
        return default


def _get_env_int(name: str, default: int) -> int:
    """Integer tunable from ``name``, falling back to ``default``."""
    return _from_env(name, default, int)


def _get_env_float(name: str, default: float) -> float:
    return _from_env(name, default, float)


def _get_env_str(name: str, default: str) -> str:
    # Blank values count as unset
    return _from_env(name, default, str)


# Hosts
WWW_HOST = _get_env_str("SNOO_WWW_HOST", "www.reddit.com")  # authorize / token / revoke
OAUTH_HOST = _get_env_str("SNOO_OAUTH_HOST", "oauth.reddit.com")  # authenticated API calls

# Endpoint paths (relative to WWW_HOST)
AUTHORIZE_PATH = "/api/v1/authorize"
ACCESS_TOKEN_PATH = "/api/v1/access_token"
REVOKE_TOKEN_PATH = "/api/v1/revoke_token"

# Throttle / transport
THROTTLE_MS = _get_env_int("SNOO_THROTTLE_MS", 1000)  # Minimum gap between outgoing calls
REQUEST_TIMEOUT_SECONDS = _get_env_float(
    "SNOO_REQUEST_TIMEOUT_SECONDS", 30
)  # Total aiohttp timeout per request
USER_AGENT = _get_env_str("SNOO_USER_AGENT", "snoo-oauth/1.0")

# Protocol constants
INVALID_TOKEN = "invalid_token"  # Sentinel access token value when unauthenticated
INSTALLED_CLIENT_GRANT = "https://oauth.reddit.com/grants/installed_client"
DEVICE_ID_PLACEHOLDER = "DO_NOT_TRACK_THIS_DEVICE"
WILDCARD_SCOPE = "*"

# Messages surfaced to callers
ACCESS_TOKEN_EXPIRED_MESSAGE = (
    "Access token has expired. "
    'Listen for the "access_token_expired" event to '
    "handle this gracefully in your app."
)
USER_REQUIRED_MESSAGE = (
    "Must be authenticated with a user to make a call to this endpoint."
)

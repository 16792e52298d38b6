"""
Tests for authorize URL construction
"""

from urllib.parse import parse_qs, urlsplit

import pytest

from snoo_oauth.config import AuthMode, Credentials, ServerConfig
from snoo_oauth.errors import ConfigurationError
from snoo_oauth.oauth import build_auth_url
from tests.fixtures.credentials import INSTALLED_APP, REDIRECT_URI, SCRIPT_APP, WEB_APP

SERVERS = ServerConfig()


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


@pytest.mark.parametrize(
    "scope",
    [[], ["identity"], ["flair", "identity"], ["modconfig", "read", "vote", "submit"]],
)
def test_explicit_url_contains_comma_joined_scope(scope):
    creds = Credentials(**WEB_APP, scope=scope)
    url = build_auth_url(creds, SERVERS, AuthMode.EXPLICIT, "foo")
    expected = "%2C".join(scope) if scope else "*"
    assert f"scope={expected}" in url
    assert url.count("client_id=") == 1
    assert _query(url)["client_id"] == ["web-key"]


def test_implicit_url_uses_installed_key_and_token_response():
    creds = Credentials(**INSTALLED_APP, scope=["identity"])
    url = build_auth_url(creds, SERVERS, AuthMode.IMPLICIT, "foo")
    q = _query(url)
    assert q["client_id"] == ["installed-key"]
    assert q["response_type"] == ["token"]
    assert "duration" not in q


def test_explicit_url_exact_layout():
    creds = Credentials(**WEB_APP, scope=["flair", "identity"], duration="permanent")
    url = build_auth_url(creds, SERVERS, AuthMode.EXPLICIT, "foo bar")
    assert url == (
        "https://www.reddit.com/api/v1/authorize?client_id=web-key"
        "&response_type=code&state=foo%20bar"
        "&redirect_uri=http%3A%2F%2Flocalhost%3A3000%2Fcallback"
        "&duration=permanent&scope=flair%2Cidentity"
    )


def test_state_passed_through_unmodified():
    creds = Credentials(**WEB_APP)
    url = build_auth_url(creds, SERVERS, AuthMode.EXPLICIT, "a&b=c/d")
    assert _query(url)["state"] == ["a&b=c/d"]
    assert _query(url)["redirect_uri"] == [REDIRECT_URI]


def test_state_generated_when_omitted():
    creds = Credentials(**WEB_APP)
    first = _query(build_auth_url(creds, SERVERS, AuthMode.EXPLICIT))["state"][0]
    second = _query(build_auth_url(creds, SERVERS, AuthMode.EXPLICIT))["state"][0]
    assert first and second and first != second


def test_mobile_friendly_uses_compact_page():
    creds = Credentials(**WEB_APP, mobile_friendly=True)
    url = build_auth_url(creds, SERVERS, AuthMode.EXPLICIT, "s")
    assert urlsplit(url).path == "/api/v1/authorize.compact"


def test_mode_mismatch_fails_closed():
    with pytest.raises(ConfigurationError):
        build_auth_url(Credentials(**WEB_APP), SERVERS, AuthMode.IMPLICIT, "s")
    with pytest.raises(ConfigurationError):
        build_auth_url(Credentials(**SCRIPT_APP), SERVERS, AuthMode.SCRIPT, "s")

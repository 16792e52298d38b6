"""
Tests for Credentials / ServerConfig models
"""

import pytest
from pydantic import ValidationError

from snoo_oauth.config import AuthMode, Credentials, Duration, ServerConfig
from tests.fixtures.credentials import INSTALLED_APP, SCRIPT_APP, WEB_APP


class TestCredentials:
    def test_scope_list_keeps_order_and_dedupes(self):
        creds = Credentials(**SCRIPT_APP, scope=["flair", " identity ", "flair", ""])
        assert creds.scope == ("flair", "identity")
        assert creds.url_scope == "flair,identity"
        assert creds.token_scope == "flair identity"

    def test_scope_string_is_split(self):
        creds = Credentials(**SCRIPT_APP, scope="read, vote submit")
        assert creds.scope == ("read", "vote", "submit")

    def test_empty_scope_is_wildcard(self):
        creds = Credentials(**SCRIPT_APP)
        assert creds.url_scope == "*"
        assert creds.token_scope == "*"

    def test_scope_rejects_non_strings(self):
        with pytest.raises(ValidationError):
            Credentials(**SCRIPT_APP, scope=["read", 3])

    def test_scope_rejects_unordered_sets(self):
        with pytest.raises(ValidationError, match="ordered list"):
            Credentials(**SCRIPT_APP, scope={"read", "vote"})
        with pytest.raises(ValidationError):
            Credentials(**SCRIPT_APP, scope=frozenset({"read"}))

    def test_script_requires_user_and_secret(self):
        with pytest.raises(ValidationError, match="username and password"):
            Credentials(mode=AuthMode.SCRIPT, client_id="k", client_secret="s")
        data = dict(SCRIPT_APP, client_secret="")
        with pytest.raises(ValidationError, match="client_secret"):
            Credentials(**data)

    @pytest.mark.parametrize("base", [WEB_APP, INSTALLED_APP])
    def test_redirect_flows_require_redirect_uri(self, base):
        data = dict(base, redirect_uri=None)
        with pytest.raises(ValidationError, match="redirect_uri"):
            Credentials(**data)

    def test_client_id_required(self):
        with pytest.raises(ValidationError):
            Credentials(mode=AuthMode.APP_ONLY, client_id="")

    def test_none_secret_becomes_empty(self):
        creds = Credentials(**dict(INSTALLED_APP, client_secret=None))
        assert creds.client_secret == ""

    def test_frozen(self):
        creds = Credentials(**WEB_APP)
        with pytest.raises(ValidationError):
            creds.client_id = "other"  # type: ignore[misc]

    def test_password_hidden_from_repr(self):
        assert "hunter2" not in repr(Credentials(**SCRIPT_APP))

    def test_from_dict_accepts_camel_case(self):
        creds = Credentials.from_dict(
            {
                "type": "explicit",
                "clientId": "web-key",
                "clientSecret": "web-secret",
                "redirectUri": "http://localhost/cb",
                "duration": "permanent",
                "mobileFriendly": True,
                "scope": ["identity"],
            }
        )
        assert creds.mode is AuthMode.EXPLICIT
        assert creds.duration is Duration.PERMANENT
        assert creds.mobile_friendly is True
        assert creds.redirect_uri == "http://localhost/cb"

    def test_from_dict_normalizes_mode_spelling(self):
        creds = Credentials.from_dict({"mode": "App-Only", "key": "k"})
        assert creds.mode is AuthMode.APP_ONLY


class TestServerConfig:
    def test_defaults(self):
        servers = ServerConfig()
        assert servers.www_url("/api/v1/access_token") == "https://www.reddit.com/api/v1/access_token"
        assert servers.oauth_url("api/v1/me") == "https://oauth.reddit.com/api/v1/me"

    def test_custom_hosts(self):
        servers = ServerConfig(www="localhost:8080", oauth="localhost:8081", scheme="http")
        assert servers.www_url("/x") == "http://localhost:8080/x"
        assert servers.oauth_url("/y") == "http://localhost:8081/y"

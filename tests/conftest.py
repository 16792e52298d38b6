import os

import pytest

from snoo_oauth.config import AuthMode, Credentials, ServerConfig
from snoo_oauth.http import Request
from snoo_oauth.oauth import OAuthEngine
from snoo_oauth.rate import Throttle
from tests.fixtures.credentials import BY_MODE, PASSWORD, USERNAME
from tests.fixtures.fake_server import OAUTH_HOST, WWW_HOST, FakeAuthServer, FakeClock

# Keep library log output terse regardless of the developer's shell
os.environ.setdefault("DEBUG", "false")

SERVERS = ServerConfig(www=WWW_HOST, oauth=OAUTH_HOST)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def throttle(clock):
    return Throttle(1000, clock=clock.time, sleep=clock.sleep)


@pytest.fixture
def server():
    srv = FakeAuthServer()
    for creds in BY_MODE.values():
        srv.register_app(creds["client_id"], creds.get("client_secret", ""))
    srv.register_user(USERNAME, PASSWORD)
    return srv


@pytest.fixture
def request_layer(throttle, server):
    return Request(throttle, session=server)


@pytest.fixture
def make_engine(request_layer):
    """Factory building an engine for a mode, with credential overrides."""

    def _make(mode: AuthMode = AuthMode.SCRIPT, **overrides) -> OAuthEngine:
        data = dict(BY_MODE[mode])
        data.update(overrides)
        return OAuthEngine(Credentials(**data), request_layer, SERVERS)

    return _make

"""
Tests for TokenStore state transitions
"""

import pytest

from snoo_oauth.constants import INVALID_TOKEN
from snoo_oauth.oauth import TokenStore


def test_initial_state():
    store = TokenStore()
    assert store.access_token == INVALID_TOKEN
    assert not store.has_access_token
    assert not store.has_refresh_token
    assert store.authorization_header() == f"bearer {INVALID_TOKEN}"


def test_commit_access_token():
    store = TokenStore()
    store.commit_access_token("abc", token_type="Bearer")
    assert store.has_access_token
    assert store.token_type == "bearer"
    assert store.authorization_header() == "bearer abc"


@pytest.mark.parametrize("bad", ["", INVALID_TOKEN, None])
def test_commit_rejects_invalid_values(bad):
    store = TokenStore()
    with pytest.raises(ValueError):
        store.commit_access_token(bad)  # type: ignore[arg-type]
    assert not store.has_access_token


def test_invalidate_keeps_refresh_token():
    store = TokenStore()
    store.commit_access_token("abc", application_only=True)
    store.commit_refresh_token("rt")
    store.invalidate_access_token()
    assert not store.has_access_token
    assert not store.application_only
    assert store.refresh_token == "rt"
    assert store.authorization_header() == f"bearer {INVALID_TOKEN}"


def test_clear_drops_everything():
    store = TokenStore()
    store.commit_access_token("abc")
    store.commit_refresh_token("rt")
    store.clear()
    assert not store.has_access_token
    assert not store.has_refresh_token


def test_refresh_token_must_be_non_empty():
    with pytest.raises(ValueError):
        TokenStore().commit_refresh_token("")

"""
Tests for environment-overridable constants
"""

import logging
from unittest.mock import patch

from snoo_oauth import constants


def test_env_int_override():
    with patch.dict("os.environ", {"SNOO_TEST_INT": "250"}):
        assert constants._get_env_int("SNOO_TEST_INT", 1000) == 250


def test_env_int_invalid_falls_back(caplog):
    with patch.dict("os.environ", {"SNOO_TEST_INT": "soon"}), caplog.at_level(logging.WARNING):
        assert constants._get_env_int("SNOO_TEST_INT", 1000) == 1000
    assert "SNOO_TEST_INT" in caplog.text


def test_env_float_override_and_fallback():
    with patch.dict("os.environ", {"SNOO_TEST_FLOAT": "2.5"}):
        assert constants._get_env_float("SNOO_TEST_FLOAT", 30.0) == 2.5
    with patch.dict("os.environ", {"SNOO_TEST_FLOAT": "x"}):
        assert constants._get_env_float("SNOO_TEST_FLOAT", 30.0) == 30.0


def test_env_str_blank_uses_default():
    with patch.dict("os.environ", {"SNOO_TEST_STR": "  "}):
        assert constants._get_env_str("SNOO_TEST_STR", "www.reddit.com") == "www.reddit.com"
    with patch.dict("os.environ", {"SNOO_TEST_STR": "localhost:3000"}):
        assert constants._get_env_str("SNOO_TEST_STR", "www.reddit.com") == "localhost:3000"


def test_protocol_constants():
    assert constants.INSTALLED_CLIENT_GRANT == "https://oauth.reddit.com/grants/installed_client"
    assert constants.DEVICE_ID_PLACEHOLDER == "DO_NOT_TRACK_THIS_DEVICE"
    assert constants.ACCESS_TOKEN_EXPIRED_MESSAGE == (
        'Access token has expired. Listen for the "access_token_expired" event to '
        "handle this gracefully in your app."
    )

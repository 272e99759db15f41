"""Pytest configuration and fixtures for huelink tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from huelink.models.bridge import Bridge

PENDING_BODY = [{"error": {"type": 101, "address": "", "description": "link button not pressed"}}]
GRANTED_BODY = [{"success": {"username": "TEzEX5HApPsYDwTmI2HqBHL-4MuQRYf8SmMB-4Wv",
                             "clientkey": "C2B605F53DCA6814775A2C9ACB20F3C3"}}]


def make_response(body, status_code=200):
    """Build a mock requests.Response carrying a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    response.content = (body if isinstance(body, str) else json.dumps(body)).encode()
    return response


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def bridge():
    """A bridge as returned by the discovery service."""
    return Bridge(host='192.168.1.2', id='001788fffe4b2a7c', port=443)


@pytest.fixture
def session():
    """Mock requests session; configure post/get per test."""
    return MagicMock()


@pytest.fixture
def pending_response():
    return make_response(PENDING_BODY)


@pytest.fixture
def granted_response():
    return make_response(GRANTED_BODY)


@pytest.fixture
def user_config_file(tmp_path, monkeypatch):
    """Point the user config file into a temporary directory."""
    path = tmp_path / '.huelink' / 'config.json'
    monkeypatch.setattr('huelink.core.config.USER_CONFIG_FILE', path)
    return path

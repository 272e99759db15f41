"""Tests for configuration functions in huelink/core/config.py

All file access goes to a temporary directory via the user_config_file fixture.
"""

import json
import os
import stat
from pathlib import Path

from huelink.core.auth import Authenticator
from huelink.core.config import (
    DISCOVERY_URL,
    USER_CONFIG_FILE,
    bridge_session,
    load_pairing,
    save_pairing,
)
from huelink.models.bridge import Bridge


class TestConstants:
    """Test that constants are properly defined."""

    def test_user_config_file_path(self):
        """USER_CONFIG_FILE should point to ~/.huelink/config.json."""
        assert isinstance(USER_CONFIG_FILE, Path)
        assert USER_CONFIG_FILE.name == 'config.json'
        assert '.huelink' in str(USER_CONFIG_FILE)

    def test_discovery_url(self):
        assert DISCOVERY_URL.startswith('https://')


class TestBridgeSession:

    def test_verification_disabled(self):
        session = bridge_session()
        assert session.verify is False


class TestSavePairing:
    """Test pairing persistence."""

    def test_creates_file_with_secure_permissions(self, user_config_file, bridge):
        auth = Authenticator(username='U', clientkey='K')

        assert save_pairing(bridge, auth) is True

        assert user_config_file.exists()
        assert stat.S_IMODE(os.stat(user_config_file).st_mode) == 0o600

    def test_writes_pairing(self, user_config_file, bridge):
        save_pairing(bridge, Authenticator(username='U', clientkey='K'))

        with open(user_config_file) as f:
            config = json.load(f)
        assert config == {
            'bridge_id': '001788fffe4b2a7c',
            'bridge_host': '192.168.1.2',
            'bridge_port': 443,
            'username': 'U',
            'clientkey': 'K',
        }

    def test_keeps_unrelated_keys(self, user_config_file, bridge):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text(json.dumps({'theme': 'dark', 'username': 'old'}))

        save_pairing(bridge, Authenticator(username='U', clientkey='K'))

        config = json.loads(user_config_file.read_text())
        assert config['theme'] == 'dark'
        assert config['username'] == 'U'

    def test_overwrites_corrupt_file(self, user_config_file, bridge):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text('{not json')

        assert save_pairing(bridge, Authenticator(username='U', clientkey='K')) is True
        assert json.loads(user_config_file.read_text())['clientkey'] == 'K'

    def test_unwritable_location(self, tmp_path, monkeypatch, bridge):
        blocker = tmp_path / 'blocker'
        blocker.write_text('')
        monkeypatch.setattr('huelink.core.config.USER_CONFIG_FILE', blocker / 'config.json')

        assert save_pairing(bridge, Authenticator(username='U', clientkey='K')) is False


class TestLoadPairing:
    """Test loading the saved pairing."""

    def test_missing_file(self, user_config_file):
        assert load_pairing() is None

    def test_round_trip(self, user_config_file):
        bridge = Bridge('fe80::1', 'abc', 8443)
        auth = Authenticator(username='U', clientkey='K')
        save_pairing(bridge, auth)

        assert load_pairing() == (bridge, auth)

    def test_corrupt_file(self, user_config_file):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text('{not json')

        assert load_pairing() is None

    def test_incomplete_pairing(self, user_config_file):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text(json.dumps({'bridge_id': 'abc', 'bridge_host': '192.168.1.2'}))

        assert load_pairing() is None

    def test_invalid_host(self, user_config_file):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text(json.dumps({
            'bridge_id': 'abc', 'bridge_host': 'not a host', 'username': 'U', 'clientkey': 'K',
        }))

        assert load_pairing() is None

    def test_port_defaults_to_443(self, user_config_file):
        user_config_file.parent.mkdir(parents=True)
        user_config_file.write_text(json.dumps({
            'bridge_id': 'abc', 'bridge_host': '192.168.1.2', 'username': 'U', 'clientkey': 'K',
        }))

        bridge, _ = load_pairing()
        assert bridge.port == 443

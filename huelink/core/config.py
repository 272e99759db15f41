"""Configuration and pairing persistence.

This module handles:
- Defaults for discovery and authentication, overridable via environment
- Loading/saving the bridge pairing in the user config file
- Building the HTTP session used to talk to a bridge
"""

import json
import logging
import os
from pathlib import Path

import requests
import urllib3
from pydantic import SecretStr
from urllib3.exceptions import InsecureRequestWarning

from huelink.models.bridge import Bridge
from huelink.models.types import StoredPairing

logger = logging.getLogger(__name__)

# N-UPnP discovery endpoint run by Signify
DISCOVERY_URL = os.getenv('HUE_DISCOVERY_URL', 'https://discovery.meethue.com/')

# Seconds allowed for a single HTTP round-trip
REQUEST_TIMEOUT = 5

# Link button handshake defaults
DEFAULT_DEVICE_TYPE = os.getenv('HUE_DEVICE_TYPE', 'huelink#cli')
DEFAULT_AUTH_TIMEOUT = 30
DEFAULT_POLL_INTERVAL = 1.0

# mDNS browse window in seconds
MDNS_BROWSE_TIMEOUT = 3.0

# User configuration file location
USER_CONFIG_FILE = Path.home() / '.huelink' / 'config.json'


def bridge_session() -> requests.Session:
    """Create a requests session for talking to a bridge.

    Bridge certificates are issued to the bridge id rather than its LAN
    address, so hostname verification cannot succeed and is disabled.
    Callers who want to pin the bridge CA can set session.verify to a file
    containing huelink.HUE_BRIDGE_ROOT_CA.
    """
    urllib3.disable_warnings(InsecureRequestWarning)
    session = requests.Session()
    session.verify = False
    return session


def _read_config_file() -> dict | None:
    if not USER_CONFIG_FILE.exists():
        return None

    with open(USER_CONFIG_FILE, 'r') as f:
        return json.load(f)


def load_pairing() -> tuple[Bridge, 'Authenticator'] | None:
    """Load the saved bridge pairing from the user config file.

    Returns:
        Tuple of (Bridge, Authenticator), or None if missing or unreadable
    """
    from huelink.core.auth import Authenticator

    try:
        config = _read_config_file()
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load config from {USER_CONFIG_FILE}: {e}")
        return None

    if not config:
        return None

    try:
        bridge = Bridge(
            host=config['bridge_host'],
            id=config['bridge_id'],
            port=config.get('bridge_port', 443),
        )
        authenticator = Authenticator(
            username=config['username'],
            clientkey=config['clientkey'],
        )
    except (KeyError, TypeError, ValueError):
        # pydantic.ValidationError is a ValueError; its text would include the secrets
        logger.warning(f"Ignoring incomplete pairing in {USER_CONFIG_FILE}")
        return None

    return bridge, authenticator


def save_pairing(bridge: Bridge, authenticator: 'Authenticator') -> bool:
    """Save a bridge pairing to the user config file.

    Creates the config directory if it doesn't exist, keeps unrelated keys
    of an existing file and sets secure file permissions (600).

    Args:
        bridge: The paired bridge
        authenticator: Credentials returned by the handshake

    Returns:
        True if saved successfully, False otherwise
    """
    try:
        USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

        config = {}
        try:
            config = _read_config_file() or {}
        except (json.JSONDecodeError, IOError):
            # Corrupt file, start fresh
            pass

        pairing: StoredPairing = {
            'bridge_id': bridge.id,
            'bridge_host': bridge.host,
            'bridge_port': bridge.port,
            'username': _reveal(authenticator.username),
            'clientkey': _reveal(authenticator.clientkey),
        }
        config.update(pairing)

        with open(USER_CONFIG_FILE, 'w') as f:
            json.dump(config, f, indent=2)

        os.chmod(USER_CONFIG_FILE, 0o600)

        logger.info(f"Saved pairing for bridge {bridge.id} to {USER_CONFIG_FILE}")
        return True

    except (IOError, OSError) as e:
        logger.error(f"Failed to save config to {USER_CONFIG_FILE}: {e}")
        return False


def _reveal(secret: SecretStr) -> str:
    return secret.get_secret_value()

"""Discover and authenticate against Philips Hue bridges."""

from huelink.core.auth import Authenticator, Pending, Success, deadline_after, parse_response
from huelink.core.certs import HUE_BRIDGE_ROOT_CA
from huelink.core.config import bridge_session
from huelink.core.discovery import discover, discover_mdns, discover_remote
from huelink.core.errors import (
    LINK_BUTTON_NOT_PRESSED,
    AuthenticationError,
    AuthenticationOtherError,
    AuthenticationTimedOut,
    HueError,
    TransportError,
)
from huelink.models.bridge import Bridge

__version__ = '0.1.0'

__all__ = [
    'Authenticator',
    'AuthenticationError',
    'AuthenticationOtherError',
    'AuthenticationTimedOut',
    'Bridge',
    'HUE_BRIDGE_ROOT_CA',
    'HueError',
    'LINK_BUTTON_NOT_PRESSED',
    'Pending',
    'Success',
    'TransportError',
    'bridge_session',
    'deadline_after',
    'discover',
    'discover_mdns',
    'discover_remote',
    'parse_response',
]

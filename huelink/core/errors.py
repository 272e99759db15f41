"""Typed errors raised by discovery and authentication.

Hierarchy:
- HueError
  - TransportError: HTTP, network, JSON or mDNS failure
  - AuthenticationError
    - AuthenticationTimedOut: deadline reached before the link button was pressed
    - AuthenticationOtherError: bridge answered with an error code other than 101
"""

# CLIP v1 error type for "link button not pressed"
LINK_BUTTON_NOT_PRESSED = 101


class HueError(Exception):
    """Base class for all huelink errors."""


class TransportError(HueError):
    """Talking to the bridge or the discovery service failed.

    The underlying exception (requests, JSON decoding, validation, zeroconf)
    is chained as __cause__.
    """


class AuthenticationError(HueError):
    """The link button handshake did not produce credentials."""


class AuthenticationTimedOut(AuthenticationError):
    """It took the user too long to press the link button."""

    def __init__(self):
        super().__init__("reached the request deadline")


class AuthenticationOtherError(AuthenticationError):
    """The bridge returned an error code other than 101.

    Such codes come from CLIP v1 and are not transient, so they are never
    retried. See https://developers.meethue.com/develop/hue-api/error-messages/
    """

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"api returned error code {code}")

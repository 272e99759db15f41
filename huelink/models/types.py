"""Type definitions for huelink.

This module provides TypedDict definitions for structured data that crosses
the wire or lands on disk, improving type safety and IDE autocompletion.
"""

from typing import TypedDict


class DiscoveryRecord(TypedDict):
    """Bridge entry returned by the N-UPnP discovery endpoint."""
    internalipaddress: str
    id: str
    port: int


class StoredPairing(TypedDict):
    """Pairing saved to the user config file after a successful handshake."""
    bridge_id: str
    bridge_host: str
    bridge_port: int
    username: str
    clientkey: str

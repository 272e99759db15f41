"""Core functionality for huelink.

This package contains:
- auth: Authenticator and the link button handshake
- discovery: Bridge discovery (N-UPnP and mDNS)
- errors: Typed error hierarchy
- config: Defaults, pairing persistence and the bridge HTTP session
- certs: Hue bridge root CA
"""

"""Data models.

This package contains:
- bridge: Bridge identity (host, id, port) produced by discovery
- types: TypedDict definitions for discovery records and stored pairings
"""

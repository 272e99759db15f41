"""CLI command modules.

This package contains:
- bridge: Bridge commands (discover, pair, setup)
"""

"""Convenience layer for Discord slash command bots and plain-text tables."""

__version__ = "0.1.0"

# lipstick/utils/__init__.py
"""Utility functions shared by the bot and table packages."""

from lipstick.utils.logging import (
    configure_logging,
    configure_structured_logging,
    get_interaction_id,
    get_logger,
    set_interaction_id,
)

__all__ = [
    "get_logger",
    "set_interaction_id",
    "get_interaction_id",
    "configure_logging",
    "configure_structured_logging",
]

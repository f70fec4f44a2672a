# lipstick/utils/logging.py
"""Structured logging with JSON format and interaction correlation support.

Provides:
- JSON-formatted log output for structured logging
- Interaction correlation ID via ContextVar for async-safe tracking
- Centralized logger configuration
"""

import json
import logging
from contextvars import ContextVar
from typing import Any

# Discord interaction ID for tracking a command across async contexts
interaction_id_var: ContextVar[str] = ContextVar("interaction_id", default="")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_interaction_id(interaction_id: str) -> None:
    """Set the interaction correlation ID for the current context.

    Args:
        interaction_id: Discord snowflake of the interaction being handled.
    """
    interaction_id_var.set(interaction_id)


def get_interaction_id() -> str:
    """Get the interaction correlation ID for the current context.

    Returns:
        Current interaction ID, or empty string if not set.
    """
    return interaction_id_var.get()


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON with timestamp, level, logger name,
    message, and optional interaction_id for correlation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        interaction_id = get_interaction_id()
        if interaction_id:
            log_data["interaction_id"] = interaction_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Configure structured JSON logging for the application.

    Sets up a StreamHandler with StructuredFormatter and applies
    it to the root logger.

    Args:
        level: Logging level (default: logging.INFO).
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def configure_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Configure either JSON or plain text logging on the root logger."""
    if json_output:
        configure_structured_logging(level)
        return

    logging.basicConfig(level=level, format=DEFAULT_FORMAT)

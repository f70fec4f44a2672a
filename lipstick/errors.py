# lipstick/errors.py
"""Error categories raised by the bot layer.

SDK exceptions are chained onto these with ``raise ... from err`` so callers
can match on the category and still inspect the original failure.
"""


class LipstickError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(LipstickError):
    """Raised when the bot is constructed with invalid options."""


class SessionError(LipstickError):
    """Raised when the Discord session fails to start."""


class CommandInvalidError(LipstickError):
    """Raised when Discord rejects a command or a command is malformed."""


class CommandSendError(LipstickError):
    """Raised when a response to an interaction could not be delivered."""


class CommandExecError(LipstickError):
    """Raised when a command handler could not complete."""


class DuplicateCommandError(LipstickError):
    """Raised when a command name is registered twice."""

    def __init__(self, name: str):
        super().__init__(f"duplicate command: {name}")
        self.name = name

"""Discord slash command bot package.

This package provides:
- Bot: wrapper around discord.Client with command registration and
  deferred interaction responses
- BotOptions: construction options, loadable from Settings
- ApplicationCommand, CommandOption, CommandChoice: slash command descriptors
- option_map, options_from, CommandOptions: option payload helpers

Entry point: python -m lipstick
"""

from lipstick.bot.bot import Bot, BotOptions, Handler
from lipstick.bot.commands import (
    ApplicationCommand,
    CommandChoice,
    CommandOption,
    CommandOptions,
    IntegrationType,
    InteractionContext,
    RegisteredCommand,
    option_map,
    options_from,
)

__all__ = [
    "Bot",
    "BotOptions",
    "Handler",
    "ApplicationCommand",
    "CommandChoice",
    "CommandOption",
    "CommandOptions",
    "IntegrationType",
    "InteractionContext",
    "RegisteredCommand",
    "option_map",
    "options_from",
]

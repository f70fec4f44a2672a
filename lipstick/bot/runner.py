# lipstick/bot/runner.py
"""Example bot runner.

Builds a Bot from environment settings, registers the example commands and
runs until SIGINT/SIGTERM.

Entry point: python -m lipstick
"""

import asyncio
import logging
import signal

import discord
from dotenv import load_dotenv

from lipstick.bot.bot import Bot, BotOptions
from lipstick.bot.commands import (
    ApplicationCommand,
    CommandOption,
    InteractionContext,
    options_from,
)
from lipstick.config import Settings, settings
from lipstick.errors import LipstickError
from lipstick.table import render
from lipstick.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def hello(interaction: discord.Interaction) -> discord.Embed:
    """Reply with a greeting, optionally addressed to a name."""
    name = options_from(interaction).string("name") or "World"
    return discord.Embed(title="It worked!", description=name)


async def whoami(interaction: discord.Interaction) -> discord.Embed:
    """Reply with a table describing the invoking user."""
    user = interaction.user
    table = render(
        ["field", "value"],
        [
            ["id", str(user.id)],
            ["name", user.name],
            ["display name", user.display_name],
        ],
    )
    return discord.Embed(title="Who am I", description=f"```\n{table}\n```")


def register_example_commands(bot: Bot) -> None:
    """Register the example slash commands on a bot."""
    user_perms = discord.Permissions(view_channel=True).value

    bot.register_handler(
        "hello",
        ApplicationCommand(
            name="hello",
            description="Example command",
            options=[
                CommandOption(
                    type=discord.AppCommandOptionType.string,
                    name="name",
                    description="Who to greet",
                )
            ],
            contexts=[InteractionContext.BOT_DM],
            default_member_permissions=user_perms,
        ),
        hello,
    )
    bot.register_handler(
        "whoami",
        ApplicationCommand(
            name="whoami",
            description="Show your Discord identity as a table",
            default_member_permissions=user_perms,
        ),
        whoami,
    )


async def run_bot(bot: Bot) -> None:
    """Start the bot and wait for a shutdown signal before closing it.

    Also returns when the gateway connection ends on its own.

    Raises:
        SessionError: If the gateway connection failed.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await bot.start()
    logger.info("Discord bot started")
    stopped = asyncio.create_task(stop.wait())
    closed = asyncio.create_task(bot.wait_closed())
    try:
        done, _ = await asyncio.wait(
            {stopped, closed}, return_when=asyncio.FIRST_COMPLETED
        )
        if closed in done:
            closed.result()
            logger.info("Discord connection closed")
        else:
            logger.info("Received shutdown signal")
    except asyncio.CancelledError:
        logger.info("Received shutdown signal")
    finally:
        stopped.cancel()
        closed.cancel()
        await bot.close()
        logger.info("Discord bot stopped")


def create_bot(config: Settings | None = None) -> Bot:
    """Create a Bot with the example commands registered.

    Args:
        config: Settings to read options from. Defaults to the global settings.

    Returns:
        Configured Bot instance (not yet started).
    """
    bot = Bot(BotOptions.from_settings(config or settings))
    register_example_commands(bot)
    return bot


def main() -> None:
    """Entry point with graceful shutdown handling."""
    load_dotenv()
    config = Settings()
    configure_logging(config.log_level.upper(), json_output=config.log_json)

    try:
        asyncio.run(run_bot(create_bot(config)))
    except LipstickError as e:
        logger.error("Discord bot failed: %s", e)
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        logger.info("Shutdown complete")


if __name__ == "__main__":
    main()

# lipstick/bot/bot.py
"""Discord bot wrapper around discord.Client.

Provides:
- Slash command registration, bulk overwritten on every gateway connect
- Connection lifecycle logging (ready, connect, disconnect)
- Deferred responses so slow handlers do not hit Discord's ~3s
  interaction timeout

Example:
    >>> bot = Bot(BotOptions(token="...", app_id="123"))
    >>> bot.register_handler("hello", ApplicationCommand(name="hello", description="Say hi"), hello)
    >>> await bot.start()
    >>> # ... runs until shutdown ...
    >>> await bot.close()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import discord
import tenacity

from lipstick import __version__
from lipstick.bot.commands import ApplicationCommand, RegisteredCommand
from lipstick.config import Settings
from lipstick.errors import (
    CommandExecError,
    CommandInvalidError,
    CommandSendError,
    ConfigError,
    DuplicateCommandError,
    SessionError,
)
from lipstick.utils.logging import set_interaction_id

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    f"DiscordBot (https://github.com/leighmacdonald/discordgo-lipstick, {__version__})"
)
DEFAULT_COMMAND_TIMEOUT = 30.0

# Handlers return the embed sent as the command's response
Handler = Callable[[discord.Interaction], Awaitable[discord.Embed | None]]


@dataclass
class BotOptions:
    """Options for constructing a Bot.

    Attributes:
        token: Discord bot token, without any "Bot " prefix.
        app_id: The bot's application ID.
        guild_id: ID of your main server. If empty, commands are registered
            globally instead.
        unregister_on_close: When true, delete all previously registered
            commands on shutdown.
        user_agent: Optional custom HTTP user agent.
        command_timeout: Seconds a handler may run before it is abandoned.
    """

    token: str
    app_id: str
    guild_id: str = ""
    unregister_on_close: bool = False
    user_agent: str = ""
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Settings) -> "BotOptions":
        return cls(
            token=settings.discord_token,
            app_id=settings.discord_app_id,
            guild_id=settings.discord_guild_id,
            unregister_on_close=settings.discord_unregister_on_close,
            user_agent=settings.discord_user_agent,
            command_timeout=settings.command_timeout,
        )


def _build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guild_messages = True
    intents.message_content = True
    intents.members = True
    return intents


def _parse_snowflake(value: str, field: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"invalid discord {field}: {value!r}") from e


def _error_embed(message: str) -> discord.Embed:
    return discord.Embed(title="Error", description=message)


class Bot:
    """Slash command bot built on a discord.Client.

    Commands are queued with register_handler() and bulk registered each
    time the gateway connects. Each incoming command is deferred before its
    handler runs, and the handler's embed replaces the deferred response.
    """

    def __init__(self, options: BotOptions) -> None:
        """Validate options and create the underlying client.

        Args:
            options: Bot configuration.

        Raises:
            ConfigError: If the app ID or token is missing or malformed.
        """
        if not options.app_id:
            raise ConfigError("invalid discord app id")
        if not options.token:
            raise ConfigError("invalid discord token")

        self._token = options.token
        self._app_id = _parse_snowflake(options.app_id, "app id")
        self._guild_id = (
            _parse_snowflake(options.guild_id, "guild id") if options.guild_id else None
        )
        self._unregister = options.unregister_on_close
        self._command_timeout = options.command_timeout

        self._handlers: dict[str, Handler] = {}
        self._commands: list[ApplicationCommand] = []
        self._registered_commands: list[RegisteredCommand] = []
        self._running = False
        self._connect_task: asyncio.Task | None = None
        self._closed = asyncio.Event()
        self._connection_error: SessionError | None = None

        client = discord.Client(intents=_build_intents(), application_id=self._app_id)
        client.http.user_agent = options.user_agent or DEFAULT_USER_AGENT

        client.event(self.on_ready)
        client.event(self.on_connect)
        client.event(self.on_disconnect)
        client.event(self.on_interaction)

        self._client = client

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def start(self) -> None:
        """Log in and open the gateway connection in the background.

        Calling start() on a running bot does nothing.

        Raises:
            SessionError: If Discord rejects the login.
        """
        if self._running:
            return

        self._running = True
        self._closed = asyncio.Event()
        self._connection_error = None

        try:
            await self._client.login(self._token)
        except discord.DiscordException as e:
            self._running = False
            raise SessionError(f"failed to start session: {e}") from e

        self._connect_task = asyncio.create_task(self._client.connect(reconnect=True))
        self._connect_task.add_done_callback(self._on_connect_task_done)

    def _on_connect_task_done(self, task: asyncio.Task) -> None:
        # close() already reset the state for a task it cancelled
        if task is not self._connect_task:
            return

        self._running = False
        if not task.cancelled():
            error = task.exception()
            if error is not None:
                logger.error("Discord gateway connection failed: %s", error)
                self._connection_error = SessionError(f"failed to start session: {error}")
                self._connection_error.__cause__ = error
        self._closed.set()

    async def wait_closed(self) -> None:
        """Wait until the gateway connection of a started bot ends.

        Raises:
            SessionError: If the connection ended with an error, such as
                rejected privileged intents or an invalid token.
        """
        await self._closed.wait()
        if self._connection_error is not None:
            raise self._connection_error

    async def close(self) -> None:
        """Unregister commands if configured, then close the session."""
        if self._unregister:
            await self._unregister_commands()

        try:
            await self._client.close()
        except Exception as e:
            logger.error("Failed to close discord session cleanly: %s", e)

        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
        self._connect_task = None
        self._running = False
        self._closed.set()

    async def __aenter__(self) -> "Bot":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _unregister_commands(self) -> None:
        http = self._client.http
        for cmd in self._registered_commands:
            try:
                if self._guild_id is None:
                    await http.delete_global_command(self._app_id, cmd.id)
                else:
                    await http.delete_guild_command(self._app_id, self._guild_id, cmd.id)
            except discord.HTTPException as e:
                logger.error("Could not unregister command %s: %s", cmd.name, e)
        self._registered_commands = []

    @property
    def session(self) -> discord.Client:
        """The underlying discord.Client."""
        return self._client

    client = session

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def commands(self) -> list[ApplicationCommand]:
        return list(self._commands)

    @property
    def registered_commands(self) -> list[RegisteredCommand]:
        return list(self._registered_commands)

    # ========================================================================
    # Command Registration
    # ========================================================================

    def register_handler(
        self, name: str, command: ApplicationCommand, handler: Handler
    ) -> None:
        """Register a slash command and its handler.

        This does not immediately register the command with Discord. It is
        added to the list of commands that are bulk registered on connect.

        Args:
            name: Command name used to dispatch interactions.
            command: Descriptor sent to Discord. Its name must equal `name`.
            handler: Coroutine producing the response embed.

        Raises:
            DuplicateCommandError: If the name is already registered.
            CommandInvalidError: If `name` and `command.name` differ.
        """
        if name in self._handlers:
            raise DuplicateCommandError(name)
        if any(existing.name == command.name for existing in self._commands):
            raise DuplicateCommandError(command.name)
        if name != command.name:
            raise CommandInvalidError(
                f"handler name {name!r} does not match command name {command.name!r}"
            )

        self._handlers[name] = handler
        self._commands.append(command)
        logger.debug("Registered command handler: %s", name)

    must_register_handler = register_handler

    async def overwrite_commands(self) -> None:
        """Replace every command registered with Discord by the queued ones.

        Commands go to the configured guild, or globally when no guild is set.

        Raises:
            CommandInvalidError: If Discord rejects the commands.
        """
        payload = [command.to_payload() for command in self._commands]
        try:
            data = await self._bulk_overwrite(payload)
        except discord.HTTPException as e:
            raise CommandInvalidError(f"command invalid: {e}") from e

        self._registered_commands = [RegisteredCommand.from_payload(item) for item in data]
        logger.info("Registered %d slash commands", len(self._registered_commands))

    @tenacity.retry(
        stop=tenacity.stop_after_attempt(3),
        wait=tenacity.wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=tenacity.retry_if_exception_type(discord.DiscordServerError),
        reraise=True,
    )
    async def _bulk_overwrite(self, payload: list[dict[str, Any]]) -> list[dict[str, Any]]:
        http = self._client.http
        if self._guild_id is None:
            return await http.bulk_upsert_global_commands(self._app_id, payload)
        return await http.bulk_upsert_guild_commands(self._app_id, self._guild_id, payload)

    # ========================================================================
    # Gateway Events
    # ========================================================================

    async def on_ready(self) -> None:
        user = self._client.user
        logger.info(
            "Logged in successfully as %s (discriminator %s)",
            user.name if user else "",
            user.discriminator if user else "",
        )

    async def on_connect(self) -> None:
        logger.info("Discord state changed: connected")

        try:
            await self.overwrite_commands()
        except CommandInvalidError as e:
            logger.error("Failed to register discord slash commands: %s", e)

    async def on_disconnect(self) -> None:
        logger.info("Discord state changed: disconnected")

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Dispatch an application command interaction to its handler."""
        if interaction.type != discord.InteractionType.application_command:
            return

        set_interaction_id(str(interaction.id))
        command = (interaction.data or {}).get("name", "")
        handler = self._handlers.get(command)
        if handler is None:
            logger.debug("No handler registered for command %s", command)
            return

        try:
            await self._handle_command(interaction, handler)
        except CommandSendError as e:
            logger.error("Failed sending success response for interaction: %s", e)

    async def _handle_command(
        self, interaction: discord.Interaction, handler: Handler
    ) -> None:
        # Discord times out interactions that are not acknowledged within ~3s
        try:
            await interaction.response.defer(thinking=True)
        except discord.DiscordException as e:
            await self._send_followup(interaction, content=str(e))
            return

        try:
            response = await self._run_handler(interaction, handler)
        except CommandExecError as e:
            await self._send_followup(interaction, embed=_error_embed(str(e)))
            return

        await self._send_response(interaction, response)

    async def _run_handler(
        self, interaction: discord.Interaction, handler: Handler
    ) -> discord.Embed:
        try:
            response = await asyncio.wait_for(
                handler(interaction), timeout=self._command_timeout
            )
        except asyncio.TimeoutError as e:
            raise CommandExecError(
                f"command timed out after {self._command_timeout:g}s"
            ) from e
        except Exception as e:
            logger.error("Command handler failed: %s", e)
            raise CommandExecError(str(e) or "could not complete command") from e

        if response is None:
            raise CommandExecError("could not complete command")
        return response

    async def _send_followup(self, interaction: discord.Interaction, **kwargs: Any) -> None:
        try:
            await interaction.followup.send(ephemeral=True, **kwargs)
        except discord.DiscordException as e:
            logger.error("Failed sending error response for interaction: %s", e)

    async def _send_response(
        self, interaction: discord.Interaction, response: discord.Embed
    ) -> None:
        try:
            await interaction.edit_original_response(embed=response)
        except discord.DiscordException as edit_error:
            try:
                await interaction.followup.send(
                    content=f"Something went wrong: {edit_error}", ephemeral=True
                )
            except discord.DiscordException as e:
                raise CommandSendError(f"failed to send response: {e}") from e

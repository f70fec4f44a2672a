# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- Bot instances with mocked Discord HTTP calls
- Fake interactions with mocked response, followup and edit calls
- Discord HTTP error construction
- Mock environment variables
"""

import asyncio
import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from lipstick.bot import Bot, BotOptions


async def _stay_connected(*args: Any, **kwargs: Any) -> None:
    await asyncio.Event().wait()


@pytest.fixture
def bot_options() -> BotOptions:
    """Options for a guild-scoped bot.

    Returns:
        BotOptions with test token, app ID and guild ID.
    """
    return BotOptions(token="test-token", app_id="1000", guild_id="2000")


@pytest.fixture
def bot(bot_options: BotOptions) -> Bot:
    """Create a Bot whose client never touches the network.

    Login, connect, close and the command HTTP endpoints are AsyncMocks.
    connect() blocks like a live gateway connection until it is cancelled.

    Returns:
        Bot instance.
    """
    instance = Bot(bot_options)
    client = instance.session
    client.login = AsyncMock()
    client.connect = AsyncMock(side_effect=_stay_connected)
    client.close = AsyncMock()
    client.http.bulk_upsert_guild_commands = AsyncMock(return_value=[])
    client.http.bulk_upsert_global_commands = AsyncMock(return_value=[])
    client.http.delete_guild_command = AsyncMock()
    client.http.delete_global_command = AsyncMock()
    return instance


@pytest.fixture
def make_interaction() -> Callable[..., MagicMock]:
    """Factory for fake application command interactions.

    Returns:
        Function taking the command name and optional raw options.
    """

    def _make(
        name: str = "hello",
        options: list[dict[str, Any]] | None = None,
        interaction_type: discord.InteractionType = discord.InteractionType.application_command,
    ) -> MagicMock:
        interaction = MagicMock()
        interaction.id = 555
        interaction.type = interaction_type
        interaction.data = {"name": name, "options": options or []}
        interaction.response.defer = AsyncMock()
        interaction.followup.send = AsyncMock()
        interaction.edit_original_response = AsyncMock()
        return interaction

    return _make


@pytest.fixture
def http_error() -> Callable[..., discord.HTTPException]:
    """Factory for Discord HTTP exceptions.

    Returns:
        Function taking a status, message and exception class.
    """

    def _make(
        status: int = 400,
        message: str = "bad request",
        cls: type[discord.HTTPException] = discord.HTTPException,
    ) -> discord.HTTPException:
        response = MagicMock(status=status, reason="Error")
        return cls(response, message)

    return _make


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing.

    Yields:
        Dictionary of mock environment variables that were set.
    """
    mock_vars = {
        "DISCORD_TOKEN": "env-token",
        "DISCORD_APP_ID": "1234",
        "DISCORD_GUILD_ID": "5678",
        "DISCORD_UNREGISTER_ON_CLOSE": "true",
        "DISCORD_USER_AGENT": "TestAgent/1.0",
        "COMMAND_TIMEOUT": "12.5",
    }

    with patch.dict(os.environ, mock_vars):
        yield mock_vars

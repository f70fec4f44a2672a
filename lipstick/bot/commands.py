# lipstick/bot/commands.py
"""Slash command descriptors and option helpers.

Descriptors are Pydantic models serialized into the JSON body of Discord's
bulk overwrite endpoint. Option helpers read the raw option payload of an
incoming interaction.
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import discord
from pydantic import BaseModel, Field, field_serializer, field_validator

# https://discord.com/developers/docs/interactions/application-commands#application-command-object-application-command-naming
COMMAND_NAME_PATTERN = re.compile(r"^[-_\w]{1,32}$")

CHAT_INPUT = 1


class InteractionContext(IntEnum):
    """Where a command may be used."""

    GUILD = 0
    BOT_DM = 1
    PRIVATE_CHANNEL = 2


class IntegrationType(IntEnum):
    """How the application must be installed for a command to show up."""

    GUILD_INSTALL = 0
    USER_INSTALL = 1


# Option types whose children are themselves options
_NESTED_OPTION_TYPES = (
    discord.AppCommandOptionType.subcommand.value,
    discord.AppCommandOptionType.subcommand_group.value,
)


def _validate_name(value: str) -> str:
    if not COMMAND_NAME_PATTERN.match(value):
        raise ValueError(f"invalid command name: {value!r}")
    if value != value.lower():
        raise ValueError(f"command name must be lowercase: {value!r}")
    return value


class CommandChoice(BaseModel):
    """A fixed choice offered for a string, integer or number option."""

    name: str = Field(..., min_length=1, max_length=100)
    value: str | int | float


class CommandOption(BaseModel):
    """A parameter of a slash command.

    Attributes:
        type: Option type, either an AppCommandOptionType or its int value.
        name: Option name, following the same rules as command names.
        description: Help text shown in the Discord client.
        required: Whether the user must supply the option.
        choices: Fixed values the user picks from.
        options: Child options for subcommands and subcommand groups.
    """

    type: int
    name: str
    description: str = Field(..., min_length=1, max_length=100)
    required: bool = False
    choices: list[CommandChoice] | None = None
    options: list["CommandOption"] | None = None
    min_value: int | float | None = None
    max_value: int | float | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, discord.AppCommandOptionType):
            return value.value
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _validate_name(value)


CommandOption.model_rebuild()


class ApplicationCommand(BaseModel):
    """Slash command descriptor registered with Discord.

    Example:
        >>> cmd = ApplicationCommand(
        ...     name="hello",
        ...     description="Example command",
        ...     contexts=[InteractionContext.BOT_DM],
        ...     default_member_permissions=discord.Permissions(view_channel=True).value,
        ... )
    """

    name: str
    description: str = Field(..., min_length=1, max_length=100)
    type: int = CHAT_INPUT
    options: list[CommandOption] = Field(default_factory=list)
    default_member_permissions: int | None = None
    contexts: list[int] | None = None
    integration_types: list[int] | None = None
    nsfw: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _validate_name(value)

    @field_validator("contexts", "integration_types", mode="before")
    @classmethod
    def _coerce_enums(cls, value: Any) -> Any:
        if value is None:
            return value
        return [getattr(item, "value", item) for item in value]

    @field_serializer("default_member_permissions")
    def _serialize_permissions(self, value: int | None) -> str | None:
        # Discord expects the permission bitfield as a string
        return None if value is None else str(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the JSON body expected by Discord."""
        return self.model_dump(mode="json", exclude_none=True)


@dataclass
class RegisteredCommand:
    """A command Discord accepted, with the ID it assigned."""

    id: int
    name: str
    guild_id: int | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "RegisteredCommand":
        guild_id = data.get("guild_id")
        return cls(
            id=int(data["id"]),
            name=data["name"],
            guild_id=int(guild_id) if guild_id else None,
        )


class CommandOptions(dict[str, dict[str, Any]]):
    """Option payloads keyed by option name, with typed accessors.

    Accessors return the type's zero value when the option is missing or
    holds a value of another type.
    """

    def _value(self, key: str) -> Any:
        option = self.get(key)
        if option is None:
            return None
        return option.get("value")

    def string(self, key: str) -> str:
        value = self._value(key)
        return value if isinstance(value, str) else ""

    def integer(self, key: str) -> int:
        value = self._value(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    def number(self, key: str) -> float:
        value = self._value(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0.0
        return float(value)

    def boolean(self, key: str) -> bool:
        value = self._value(key)
        return value if isinstance(value, bool) else False


def option_map(options: list[dict[str, Any]] | None) -> CommandOptions:
    """Flatten slash command options into a single name-keyed map.

    Subcommand and subcommand group entries are kept under their own name
    and their children are merged into the same map.

    Args:
        options: Raw option list from an interaction payload.

    Returns:
        CommandOptions keyed by option name.
    """
    result = CommandOptions()
    for option in options or []:
        result[option["name"]] = option
        if option.get("type") in _NESTED_OPTION_TYPES:
            result.update(option_map(option.get("options")))
    return result


def options_from(interaction: discord.Interaction) -> CommandOptions:
    """Build the option map for an application command interaction."""
    data = interaction.data or {}
    return option_map(data.get("options"))

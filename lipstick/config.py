# lipstick/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Discord application
    discord_token: str = ""  # Raw bot token, without the "Bot " prefix
    discord_app_id: str = ""
    discord_guild_id: str = ""  # Empty registers commands globally
    discord_unregister_on_close: bool = False
    discord_user_agent: str = ""

    # Seconds a slash command handler may run before it is abandoned
    command_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,  # Allow case-insensitive env var names
    )


# Singleton instance - import this in your code
settings = Settings()

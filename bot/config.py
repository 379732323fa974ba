"""
Configuration management for the bot.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from bot import __version__

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_PREFIX = "herb"


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_BOT_TOKEN: str = ""
    DISCORD_APP_ID: str = ""

    # Commands
    PREFIX: str = DEFAULT_PREFIX

    # Display
    VERSION: str = __version__

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            DISCORD_BOT_TOKEN=os.getenv("DISCORD_BOT_TOKEN", "").strip(),
            DISCORD_APP_ID=os.getenv("DISCORD_APP_ID", "").strip(),
            PREFIX=(os.getenv("PREFIX", "").strip() or DEFAULT_PREFIX).lower(),
            VERSION=os.getenv("VERSION", "").strip() or __version__,
            DEBUG=os.getenv("DEBUG", "false").lower() == "true",
        )

    def require_token(self) -> str:
        """Get the bot token, failing when it is not configured."""
        if not self.DISCORD_BOT_TOKEN:
            raise ValueError("ENV Error: DISCORD_BOT_TOKEN is not set!")
        return self.DISCORD_BOT_TOKEN

    def require_app_id(self) -> int:
        """Get the application id, failing when it is missing or malformed."""
        if not self.DISCORD_APP_ID:
            raise ValueError("ENV Error: DISCORD_APP_ID is not set!")
        try:
            return int(self.DISCORD_APP_ID)
        except ValueError:
            raise ValueError(f"ENV Error: DISCORD_APP_ID is not a valid id: {self.DISCORD_APP_ID!r}") from None

    def validate(self) -> None:
        """Validate required configuration."""
        self.require_token()
        self.require_app_id()

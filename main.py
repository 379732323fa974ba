"""
Entry point for the bot.
"""

import asyncio
import sys

import discord

from bot import __version__
from bot.client import run_bot
from utils.logger import get_logger

logger = get_logger("Main")


def main():
    """Main entry point."""
    try:
        logger.info(f"Starting herb-bot@{__version__}...")
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(0)
    except discord.LoginFailure as e:
        logger.error(f"Login failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

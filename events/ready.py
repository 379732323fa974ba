"""
Ready Event
Syncs slash commands and installs the global error observers
"""

import asyncio
from typing import Any

import discord

from utils.logger import get_logger

logger = get_logger("Events")


async def handle_ready(app: Any) -> None:
    """
    Run the one-time work that needs a live connection.

    Args:
        app: The running HerbBot
    """
    app.config.require_app_id()

    try:
        count = await app.sync_commands()
        noun = "command" if count == 1 else "commands"
        logger.info(f"Registered {count} application {noun}")
    except discord.HTTPException as error:
        logger.error(f"Command sync failed: code={error.code} status={error.status} message={error.text}")
    except Exception:
        logger.exception("Application Command Setup Error")

    app.error_handler.initialize(asyncio.get_running_loop())

    logger.info(f'{app.user or "UNDEFINED_TAG"} is online! Prefix set as "{app.config.PREFIX}"')


def setup(app: Any) -> None:
    """Add the ready listener; reconnects do not repeat it."""
    fired = False

    async def on_ready() -> None:
        nonlocal fired
        if fired:
            return
        fired = True
        await handle_ready(app)

    app.add_listener(on_ready, "on_ready")

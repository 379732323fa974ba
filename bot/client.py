"""
Discord client setup using discord.py.
"""

import asyncio
import logging
import signal
from typing import Any, Optional

import discord
from discord import app_commands
from discord.ext import commands

from bot.config import Config
from bot.loader import load_modules
from bot.registry import ROOT_DIR, CommandRegistry
from bot.responses import Reply, ResponseKind, respond
from utils.error_handler import ErrorHandler, get_error_handler
from utils.logger import get_logger, set_log_level, setup_logging

logger = get_logger("Client")


def presence_text(config: Config) -> str:
    """Custom status shown under the bot's name."""
    return f"🚀 | {config.PREFIX}help | v{config.VERSION}"


class RegistryCommandTree(app_commands.CommandTree):
    """Command tree that leaves every interaction to the registry listeners."""

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return False


class HerbBot(commands.Bot):
    """Discord bot that routes prefix and slash commands to the registry."""

    def __init__(
        self,
        config: Config,
        registry: Optional[CommandRegistry] = None,
        events_dir: str = "events",
        base_dir: Optional[str] = None,
    ):
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=config.PREFIX,
            help_command=None,
            tree_cls=RegistryCommandTree,
            intents=intents,
            activity=discord.CustomActivity(name=presence_text(config)),
        )

        self.config = config
        self.base_dir = base_dir or ROOT_DIR
        self.registry = registry if registry is not None else CommandRegistry("commands", self.base_dir)
        self.events_dir = events_dir
        self.error_handler: ErrorHandler = get_error_handler()

    async def init_commands(self) -> None:
        """Load command definitions into the registry."""
        await self.registry.load()
        logger.info("Commands initialized")

    async def init_events(self) -> int:
        """
        Import event modules and let each bind its handlers.

        Returns:
            Number of event modules bound
        """
        modules = await load_modules(self.events_dir, self.base_dir, logger, "event")

        bound = 0
        for path, module in modules:
            setup = getattr(module, "setup", None)
            if not callable(setup):
                logger.warning(f"[events] Skipped {path}: missing 'setup'")
                continue
            try:
                setup(self)
                bound += 1
            except Exception:
                logger.exception(f"[events] Failed to load event from {path}")

        logger.info("Events registered")
        return bound

    async def respond(self, context: Any, message: Reply, kind: ResponseKind = ResponseKind.DEFAULT) -> Any:
        """Send a reply for an invocation (see bot.responses.respond)."""
        return await respond(context, message, kind)

    async def sync_commands(self) -> int:
        """
        Replace every global application command with the registry's schemas.

        Returns:
            Number of commands submitted
        """
        app_id = self.config.require_app_id()
        payload = self.registry.to_payload()
        await self.http.bulk_upsert_global_commands(app_id, payload)
        return len(payload)

    async def on_message(self, message: discord.Message) -> None:
        """Prefix commands are handled by the registry listeners, not discord.ext.commands."""

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        """Log exceptions that escape an event handler."""
        logger.exception(f"Unhandled error in {event_method}")

    async def close(self) -> None:
        """Clean shutdown."""
        logger.info("Shutting down bot...")
        self.error_handler.shutdown()
        await super().close()


def create_bot(config: Config) -> HerbBot:
    """Create and return bot instance."""
    return HerbBot(config)


async def run_bot(config: Optional[Config] = None) -> None:
    """
    Load commands, then events, then connect.

    Raises:
        ValueError: If the token or application id is missing
        discord.LoginFailure: If Discord rejects the token
    """
    config = config or Config.from_env()
    config.validate()

    if config.DEBUG:
        set_log_level(logging.DEBUG)
    setup_logging("discord")

    bot = create_bot(config)

    await bot.init_commands()
    await bot.init_events()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, lambda s=sig: _request_shutdown(bot, s))
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    async with bot:
        await bot.start(config.DISCORD_BOT_TOKEN)


def _request_shutdown(bot: HerbBot, sig: signal.Signals) -> None:
    logger.info(f"Received signal {sig.name}, shutting down...")
    asyncio.create_task(bot.close())

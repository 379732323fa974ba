"""
Command Events
Forwards prefix messages and interactions to the command router
"""

from typing import Any

import discord

from bot.context import CommandContext, interaction_command_name
from bot.router import dispatch, dispatch_autocomplete, parse_prefixed
from utils.logger import get_logger

logger = get_logger("Events")


async def handle_message(app: Any, message: discord.Message) -> None:
    """
    Run the prefix command a guild member's message names, if any.

    Args:
        app: The running HerbBot
        message: Incoming message
    """
    try:
        if message.author.bot:
            return
        if message.guild is None:
            return
        if not isinstance(message.author, discord.Member):
            return

        parsed = parse_prefixed(message.content, app.config.PREFIX)
        if parsed is None:
            return

        token, args = parsed
        command = app.registry.resolve(token)
        if command is None:
            return

        await message.channel.typing()

        context = CommandContext(app=app, source=message, args=args, guild=message.guild, member=message.author)
        await dispatch(context, command)
    except Exception:
        logger.exception("Prefix Command Handler Error")


async def handle_interaction(app: Any, interaction: discord.Interaction) -> None:
    """
    Run the slash command or autocomplete handler an interaction targets.

    Args:
        app: The running HerbBot
        interaction: Incoming interaction
    """
    try:
        guild = interaction.guild
        if guild is None:
            return
        member = interaction.user
        if not isinstance(member, discord.Member):
            return

        if interaction.type is discord.InteractionType.autocomplete:
            command = app.registry.get(interaction_command_name(interaction) or "")
            if command is None:
                return
            context = CommandContext(app=app, source=interaction, guild=guild, member=member)
            await dispatch_autocomplete(context, command)
            return

        if interaction.type is discord.InteractionType.application_command:
            command = app.registry.get(interaction_command_name(interaction) or "")
            if command is None:
                return

            if not interaction.response.is_done():
                await interaction.response.defer()

            context = CommandContext(app=app, source=interaction, guild=guild, member=member)
            await dispatch(context, command)
    except Exception:
        logger.exception("Interaction Command Handler Error")


def setup(app: Any) -> None:
    """Add the message and interaction listeners."""

    async def on_message(message: discord.Message) -> None:
        await handle_message(app, message)

    async def on_interaction(interaction: discord.Interaction) -> None:
        await handle_interaction(app, interaction)

    app.add_listener(on_message, "on_message")
    app.add_listener(on_interaction, "on_interaction")

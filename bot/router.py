"""
Command Router
Turns prefix messages into invocations and runs command handlers safely
"""

from typing import List, Optional, Tuple

from bot.context import CommandContext, InvocationKind
from bot.registry import Command
from bot.responses import GENERIC_FAILURE, ResponseKind
from utils.discord import DiscordUtils
from utils.logger import get_logger

logger = get_logger("Router")


def parse_prefixed(content: str, prefix: str) -> Optional[Tuple[str, List[str]]]:
    """
    Split a prefixed message into a command token and its arguments.

    Args:
        content: Raw message content
        prefix: Command prefix, matched case-insensitively

    Returns:
        (lower-cased token, args), or None if the message is not a command
    """
    if not prefix or not content.lower().startswith(prefix.lower()):
        return None

    parts = content[len(prefix):].split()
    if not parts:
        return None

    return parts[0].lower(), parts[1:]


async def dispatch(context: CommandContext, command: Command) -> bool:
    """
    Run a command, converting any failure into a generic error reply.

    Args:
        context: Invocation context
        command: Resolved command

    Returns:
        True if the handler completed without raising
    """
    label = "Prefix Command Error" if context.kind is InvocationKind.TEXT_MESSAGE else "Slash Command Error"

    try:
        await command.run(context)
        return True
    except Exception:
        logger.exception(f"{label} - {command.name}")

    try:
        await context.app.respond(context, GENERIC_FAILURE, ResponseKind.APP_ERROR)
    except Exception:
        logger.exception(f"Could not report failure of {command.name}")

    return False


async def dispatch_autocomplete(context: CommandContext, command: Command) -> bool:
    """
    Run a command's autocomplete handler, if it has one.

    Expired interactions are expected here and are not logged.

    Args:
        context: Invocation context for an autocomplete interaction
        command: Resolved command

    Returns:
        True if a handler ran without raising
    """
    if command.autocomplete is None:
        return False

    try:
        await command.autocomplete(context)
        return True
    except Exception as error:
        if not DiscordUtils.is_expired_interaction(error):
            logger.exception(f"Autocomplete Error - {command.name}")
        return False

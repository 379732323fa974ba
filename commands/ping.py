"""
Ping Command
Shows the websocket latency to Discord
"""

import math

from bot.context import CommandContext
from bot.registry import Command, CommandSchema


def format_latency(latency: float) -> str:
    """Format a latency in seconds as whole milliseconds."""
    if not math.isfinite(latency) or latency < 0:
        return "--"
    return str(round(latency * 1000))


async def run(ctx: CommandContext):
    return await ctx.app.respond(ctx, f"📶\u2002{format_latency(ctx.app.latency)} ms")


command = Command(
    schema=CommandSchema(description="Displays the current websocket ping to Discord"),
    run=run,
)

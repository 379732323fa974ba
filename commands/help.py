"""
Help Command
Shows available commands and command details
"""

from typing import List, Tuple

from discord import AppCommandOptionType, Embed, app_commands

from bot.context import CommandContext
from bot.registry import Command, CommandOption, CommandSchema
from bot.responses import ResponseKind, ResponsePayload, ambient_colour
from utils.logger import get_logger

logger = get_logger("Help")

# Discord accepts at most 25 autocomplete choices
MAX_CHOICES = 25


def _describe(description: str) -> str:
    return f" — {description}" if description else ""


def command_routes(cmd: Command) -> List[str]:
    """
    List the ways a command can be invoked.

    Args:
        cmd: Registered command

    Returns:
        One line per sub-command, or per plain option (``*`` marks required)
    """
    routes: List[str] = []
    for option in cmd.schema.options:
        if option.type is AppCommandOptionType.subcommand:
            routes.append(f"/{cmd.name} {option.name}{_describe(option.description)}")
        elif option.type is AppCommandOptionType.subcommand_group:
            for sub in option.options:
                routes.append(f"/{cmd.name} {option.name} {sub.name}{_describe(sub.description)}")
        else:
            routes.append(f"`{option.name}{'*' if option.required else ''}`")
    return routes


def has_required_option(cmd: Command) -> bool:
    """Check whether a command has a required plain option."""
    return any(not option.is_subcommand and option.required for option in cmd.schema.options)


def command_field(cmd: Command) -> Tuple[str, str]:
    """
    Build the (name, value) help field for a command.

    Args:
        cmd: Registered command

    Returns:
        Field name with aliases, and field value with description, routes and help
    """
    routes = command_routes(cmd)
    routes_text = "\n".join(routes)
    help_text = cmd.help.strip()

    if routes and help_text:
        value = f"{cmd.description}\nRoutes:\n{routes_text}\n{help_text}"
    elif routes:
        value = f"{cmd.description}\n{routes_text}"
    elif help_text:
        value = f"{cmd.description}\n{help_text}"
    else:
        value = cmd.description

    if cmd.aliases:
        aliases = ", ".join(f"`{alias}`" for alias in cmd.aliases)
        name = f"{cmd.name} ({aliases})"
    else:
        name = cmd.name

    return name, value.strip() or "No description"


async def run(ctx: CommandContext):
    registry = ctx.app.registry
    query = ctx.option("command") or (ctx.args[0] if ctx.args else None)

    if query:
        target = registry.resolve(query)
        if target is None:
            return await ctx.app.respond(ctx, f"Unknown command: {query}", ResponseKind.USER_ERROR)
        commands = [target]
    else:
        commands = registry.all()

    try:
        embed = Embed(
            colour=ambient_colour(ctx.source),
            title="Commands",
            description=f"Prefix: **{ctx.app.config.PREFIX}**",
        )
        if any(has_required_option(cmd) for cmd in commands):
            embed.set_footer(text="* = required")
        for cmd in commands:
            name, value = command_field(cmd)
            embed.add_field(name=name, value=value, inline=False)
    except Exception:
        logger.exception("Help Command Error")
        return await ctx.app.respond(ctx, "Could not display commands", ResponseKind.APP_ERROR)

    return await ctx.app.respond(ctx, ResponsePayload(embeds=[embed]))


async def autocomplete(ctx: CommandContext) -> None:
    current = (ctx.focused_value() or "").lower()
    names = [cmd.name for cmd in ctx.app.registry if cmd.name.startswith(current)]
    choices = [app_commands.Choice(name=name, value=name) for name in names[:MAX_CHOICES]]
    await ctx.source.response.autocomplete(choices)


command = Command(
    schema=CommandSchema(
        description="Displays a list of commands",
        options=(
            CommandOption(
                name="command",
                description="Show a single command",
                autocomplete=True,
            ),
        ),
    ),
    run=run,
    aliases=("h",),
    help="Use `help <command>` for a single command",
    autocomplete=autocomplete,
)

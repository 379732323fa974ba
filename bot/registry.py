"""
Command Registry
Command definitions, their slash-command schema, and the name/alias lookup table
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Tuple

import discord
from discord.app_commands.commands import validate_name

from bot.loader import load_modules
from utils.logger import get_logger

# Handlers receive a bot.context.CommandContext
CommandHandler = Callable[[Any], Awaitable[Any]]

# Directory that holds the importable top-level packages
ROOT_DIR = str(Path(__file__).resolve().parent.parent)

# Application command type for slash commands
CHAT_INPUT = 1

# Discord limits for application command schemas
MAX_DESCRIPTION = 100
MAX_OPTIONS = 25


def _check_entry(name: str, description: str, options: Tuple[Any, ...]) -> None:
    validate_name(name)
    if not 1 <= len(description) <= MAX_DESCRIPTION:
        raise ValueError(f"description of {name!r} must be 1-{MAX_DESCRIPTION} characters")
    if len(options) > MAX_OPTIONS:
        raise ValueError(f"{name!r} has more than {MAX_OPTIONS} options")
    for option in options:
        option.validate()


@dataclass(frozen=True)
class CommandOption:
    """An option, sub-command or sub-command group of a slash command."""

    name: str
    description: str
    type: discord.AppCommandOptionType = discord.AppCommandOptionType.string
    required: bool = False
    autocomplete: bool = False
    options: Tuple["CommandOption", ...] = ()

    @property
    def is_subcommand(self) -> bool:
        return self.type in (
            discord.AppCommandOptionType.subcommand,
            discord.AppCommandOptionType.subcommand_group,
        )

    def validate(self) -> None:
        """Raise ValueError if Discord would reject this option."""
        _check_entry(self.name, self.description, self.options)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
        }
        if self.required:
            data["required"] = True
        if self.autocomplete:
            data["autocomplete"] = True
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        return data


@dataclass(frozen=True)
class CommandSchema:
    """Slash command schema, submitted verbatim to Discord."""

    name: str = ""
    description: str = ""
    options: Tuple[CommandOption, ...] = ()

    def with_name(self, name: str) -> "CommandSchema":
        return replace(self, name=name)

    def validate(self) -> None:
        """
        Check the schema against Discord's naming and length rules.

        Raises:
            ValueError: If a name, description or option list would be rejected
        """
        _check_entry(self.name, self.description, self.options)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": CHAT_INPUT,
            "options": [option.to_dict() for option in self.options],
        }


@dataclass(frozen=True)
class Command:
    """A command definition exported by a module under ``commands/``."""

    schema: Optional[CommandSchema]
    run: Optional[CommandHandler]
    aliases: Tuple[str, ...] = ()
    help: str = ""
    autocomplete: Optional[CommandHandler] = None

    @property
    def name(self) -> str:
        return self.schema.name if self.schema else ""

    @property
    def description(self) -> str:
        return self.schema.description if self.schema else ""

    def matches_alias(self, token: str) -> bool:
        token = token.lower()
        return any(alias.lower() == token for alias in self.aliases)


class CommandRegistry:
    """Name -> Command table, filled once by load() and read-only afterwards."""

    def __init__(self, directory: str = "commands", base_dir: Optional[str] = None):
        self.logger = get_logger("Registry")
        self.directory = directory
        self.base_dir = base_dir or ROOT_DIR
        self.commands: Dict[str, Command] = {}
        self.loaded = False

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands.values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self.commands

    async def load(self) -> "CommandRegistry":
        """
        Import every command module and register its ``command`` export.

        Modules are imported concurrently but registered in path order, so
        the first of two conflicting definitions always wins.

        Returns:
            Self for chaining
        """
        modules = await load_modules(self.directory, self.base_dir, self.logger, "command")

        for path, module in modules:
            command = getattr(module, "command", None)
            self.register(command, source=path)

        self.loaded = True
        self.logger.info(f"Loaded {len(self.commands)} commands")
        return self

    def register(self, command: Any, source: str = "<inline>") -> bool:
        """
        Register a command definition.

        Invalid definitions and name or alias conflicts are logged and skipped.

        Args:
            command: Object exported as ``command`` by a definition module
            source: Where the definition came from, for log messages

        Returns:
            True if the command was registered
        """
        if not isinstance(command, Command) or command.schema is None or command.run is None:
            self.logger.warning(f"Skipped {source}: missing 'command.schema' or 'command.run'")
            return False

        if not command.schema.name:
            stem = os.path.splitext(os.path.basename(source))[0].lower()
            command = replace(command, schema=command.schema.with_name(stem))

        try:
            command.schema.validate()
        except ValueError as error:
            self.logger.warning(f"Skipped {source}: invalid schema: {error}")
            return False

        name = command.name.lower()
        if name in self.commands:
            self.logger.warning(f'Duplicate command name "{name}" in {source}')
            return False

        for existing in self.commands.values():
            if existing.matches_alias(name):
                self.logger.warning(f'Command name "{name}" in {source} collides with an alias of {existing.name}')
                return False
            for alias in command.aliases:
                if alias.lower() == existing.name.lower() or existing.matches_alias(alias):
                    self.logger.warning(f'Alias "{alias}" of {name} in {source} collides with {existing.name}')
                    return False

        self.commands[name] = command
        self.logger.debug(f"Registered command: {name}")
        return True

    def get(self, name: str) -> Optional[Command]:
        """
        Get a command by exact name.

        Args:
            name: Command name

        Returns:
            Command or None if not found
        """
        return self.commands.get(name.lower())

    def resolve(self, token: str) -> Optional[Command]:
        """
        Get a command by name, falling back to its aliases.

        Args:
            token: Command name or alias (case-insensitive)

        Returns:
            Command or None if nothing matches
        """
        command = self.get(token)
        if command is not None:
            return command

        for candidate in self.commands.values():
            if candidate.matches_alias(token):
                return candidate

        return None

    def all(self) -> List[Command]:
        """Get all registered commands in registration order."""
        return list(self.commands.values())

    def to_payload(self) -> List[Dict[str, Any]]:
        """Build the bulk application-command payload for Discord."""
        return [command.schema.to_dict() for command in self.commands.values()]

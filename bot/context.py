"""
Invocation Context
The per-event value handed to command handlers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import discord


class InvocationKind(Enum):
    """What kind of platform event started an invocation."""

    TEXT_MESSAGE = "text_message"
    CHAT_INPUT = "chat_input"
    COMPONENT = "component"
    AUTOCOMPLETE = "autocomplete"


_INTERACTION_KINDS = {
    discord.InteractionType.application_command: InvocationKind.CHAT_INPUT,
    discord.InteractionType.component: InvocationKind.COMPONENT,
    discord.InteractionType.autocomplete: InvocationKind.AUTOCOMPLETE,
}


def classify(source: Any) -> InvocationKind:
    """
    Tag a message or interaction with its invocation kind.

    Args:
        source: discord.Message or discord.Interaction

    Returns:
        The matching InvocationKind

    Raises:
        TypeError: If the source is neither a message nor a supported interaction
    """
    if isinstance(source, discord.Message):
        return InvocationKind.TEXT_MESSAGE
    if isinstance(source, discord.Interaction):
        kind = _INTERACTION_KINDS.get(source.type)
        if kind is not None:
            return kind
        raise TypeError(f"Unsupported interaction type: {source.type}")
    raise TypeError(f"Cannot respond to {type(source).__name__}")


def _flatten_options(options: Iterable[Dict[str, Any]]) -> Iterable[Dict[str, Any]]:
    for option in options:
        yield option
        yield from _flatten_options(option.get("options") or [])


@dataclass
class CommandContext:
    """
    Everything a command handler needs about one invocation.

    Attributes:
        app: The running bot (gives access to registry, config and respond)
        source: The originating discord.Message or discord.Interaction
        args: Tokenized arguments for text invocations, empty otherwise
        guild: Guild the invocation came from
        member: Member who invoked the command
    """

    app: Any
    source: Any
    args: List[str] = field(default_factory=list)
    guild: Optional[discord.Guild] = None
    member: Optional[discord.Member] = None

    @property
    def kind(self) -> InvocationKind:
        return classify(self.source)

    @property
    def is_interaction(self) -> bool:
        return self.kind is not InvocationKind.TEXT_MESSAGE

    def _options(self) -> List[Dict[str, Any]]:
        if not self.is_interaction:
            return []
        data = getattr(self.source, "data", None) or {}
        return list(_flatten_options(data.get("options") or []))

    def option(self, name: str, default: Any = None) -> Any:
        """
        Get the value of a structured option, searching nested sub-commands.

        Args:
            name: Option name
            default: Value returned when the option was not supplied

        Returns:
            The option value, or ``default``
        """
        for option in self._options():
            if option.get("name") == name and "value" in option:
                return option["value"]
        return default

    def focused_value(self) -> Optional[str]:
        """Get the partial value the user is typing during autocomplete."""
        for option in self._options():
            if option.get("focused"):
                return str(option.get("value", ""))
        return None


def interaction_command_name(interaction: Any) -> Optional[str]:
    """Get the command name Discord resolved for an interaction."""
    data = getattr(interaction, "data", None) or {}
    return data.get("name")

"""
Response Formatter
Builds outgoing payloads and picks where to deliver them
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import discord

from bot.context import InvocationKind, classify
from utils.discord import EMBED_LIMITS, DiscordUtils, EmbedLike
from utils.logger import get_logger

logger = get_logger("Responses")

GENERIC_FAILURE = "Something went wrong"


class ResponseKind(Enum):
    """How a response is presented and delivered."""

    DEFAULT = "default"
    CHANNEL = "channel"
    REPLY = "reply"
    APP_ERROR = "app_error"
    USER_ERROR = "user_error"

    @property
    def is_error(self) -> bool:
        return self in (ResponseKind.APP_ERROR, ResponseKind.USER_ERROR)


@dataclass
class ResponsePayload:
    """A structured message: optional text, embeds and components."""

    content: Optional[str] = None
    embeds: List[EmbedLike] = field(default_factory=list)
    view: Optional[discord.ui.View] = None
    ephemeral: bool = False

    def send_kwargs(self, allow_ephemeral: bool = False) -> Dict[str, Any]:
        """
        Keyword arguments for a send-style call.

        Args:
            allow_ephemeral: Whether the target call accepts ``ephemeral``

        Returns:
            Keyword arguments containing only the parts that are set
        """
        kwargs: Dict[str, Any] = {"embeds": list(self.embeds)}
        if self.content is not None:
            kwargs["content"] = self.content
        if self.view is not None:
            kwargs["view"] = self.view
        if allow_ephemeral and self.ephemeral:
            kwargs["ephemeral"] = True
        return kwargs

    def edit_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for an edit-style call (no visibility change)."""
        return self.send_kwargs(allow_ephemeral=False)


Reply = Union[str, ResponsePayload]

# Glyph and colour per error kind
_STYLES = {
    ResponseKind.APP_ERROR: ("⚠️\u2002", discord.Colour.orange()),
    ResponseKind.USER_ERROR: ("❌\u2002", discord.Colour.red()),
}


def ambient_colour(source: Any) -> Optional[discord.Colour]:
    """Get the bot's display colour in the guild of a message or interaction."""
    guild = getattr(source, "guild", None)
    me = getattr(guild, "me", None) if guild is not None else None
    colour = getattr(me, "colour", None) if me is not None else None
    return colour if isinstance(colour, discord.Colour) else None


def create_response(context: Any, message: Reply, kind: ResponseKind = ResponseKind.DEFAULT) -> ResponsePayload:
    """
    Build the first payload for a reply request.

    Strings become a single styled embed. Structured payloads keep their
    content and components, with embeds sanitized and cut to the first page.
    Error kinds are ephemeral when the source is an interaction.

    Args:
        context: Object carrying the originating ``source``
        message: Text or structured payload
        kind: Response kind

    Returns:
        Payload ready to send
    """
    source = context.source
    ephemeral = kind.is_error and classify(source) is not InvocationKind.TEXT_MESSAGE

    if isinstance(message, str):
        glyph, colour = _STYLES.get(kind, ("", ambient_colour(source)))
        embed = discord.Embed(colour=colour, description=f"{glyph}**{message}**")
        return ResponsePayload(embeds=DiscordUtils.sanitize_embeds([embed]), ephemeral=ephemeral)

    sanitized = DiscordUtils.sanitize_embeds(message.embeds)
    return replace(
        message,
        embeds=sanitized[:EMBED_LIMITS["EMBEDS_PER_MESSAGE"]],
        ephemeral=message.ephemeral or ephemeral,
    )


async def _send_first(source: Any, invocation: InvocationKind, payload: ResponsePayload, kind: ResponseKind) -> Any:
    channel = getattr(source, "channel", None)

    if kind is ResponseKind.CHANNEL and DiscordUtils.is_text_channel(channel):
        return await channel.send(**payload.send_kwargs())

    if invocation is InvocationKind.CHAT_INPUT:
        if source.response.is_done():
            return await source.edit_original_response(**payload.edit_kwargs())
        return await source.response.send_message(**payload.send_kwargs(allow_ephemeral=True))

    if invocation is InvocationKind.COMPONENT:
        if source.response.is_done():
            return await source.followup.send(**payload.send_kwargs(allow_ephemeral=True))
        return await source.response.edit_message(**payload.edit_kwargs())

    if invocation is InvocationKind.AUTOCOMPLETE:
        raise TypeError("Autocomplete interactions cannot carry messages")

    if kind is ResponseKind.REPLY:
        return await source.reply(**payload.send_kwargs())
    if DiscordUtils.is_text_channel(channel):
        return await channel.send(**payload.send_kwargs())
    return await source.reply(**payload.send_kwargs())


async def _send_follow_up(source: Any, invocation: InvocationKind, payload: ResponsePayload) -> Any:
    if invocation in (InvocationKind.CHAT_INPUT, InvocationKind.COMPONENT):
        return await source.followup.send(**payload.send_kwargs(allow_ephemeral=True))

    channel = getattr(source, "channel", None)
    if DiscordUtils.is_text_channel(channel):
        return await channel.send(**payload.send_kwargs())
    return await source.reply(**payload.send_kwargs())


async def respond(context: Any, message: Reply, kind: ResponseKind = ResponseKind.DEFAULT) -> Any:
    """
    Send a reply to whatever started an invocation.

    Embeds beyond the per-message limit are sent as follow-up messages of
    up to ten embeds each, in their original order.

    Args:
        context: Object carrying the originating ``source``
        message: Text or structured payload
        kind: Response kind

    Returns:
        Whatever the first send call returned
    """
    source = context.source
    invocation = classify(source)
    first = create_response(context, message, kind)
    response = await _send_first(source, invocation, first, kind)

    if isinstance(message, str) or not message.embeds:
        return response

    pages = DiscordUtils.chunk_embeds(DiscordUtils.sanitize_embeds(message.embeds))
    for page in pages[1:]:
        follow_up = ResponsePayload(embeds=page, ephemeral=first.ephemeral)
        await _send_follow_up(source, invocation, follow_up)

    if len(pages) > 1:
        logger.debug(f"Sent {len(pages)} pages of embeds")

    return response

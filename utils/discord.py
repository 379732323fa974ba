"""
Discord Utilities
Helper functions for fitting embeds inside Discord's limits
"""

from typing import Any, Dict, Iterable, List, Optional, Union

import discord

from utils.text import chunk, truncate

# Discord API ceilings for embeds
EMBED_LIMITS = {
    "TITLE": 256,
    "DESCRIPTION": 4096,
    "FIELDS": 25,
    "FIELD_NAME": 256,
    "FIELD_VALUE": 1024,
    "FOOTER": 2048,
    "AUTHOR": 256,
    "EMBEDS_PER_MESSAGE": 10,
    "TOTAL_EMBEDS": 25,
}

# JSON error code returned when an interaction token has expired
UNKNOWN_INTERACTION = 10062

EmbedLike = Union[discord.Embed, Dict[str, Any]]


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    def sanitize_embed(embed: EmbedLike) -> discord.Embed:
        """
        Return a copy of an embed with every text part truncated to its limit.

        Args:
            embed: Embed or raw embed dict

        Returns:
            New embed; the input is left untouched
        """
        result = discord.Embed.from_dict(embed) if isinstance(embed, dict) else embed.copy()

        if result.title:
            result.title = truncate(result.title, EMBED_LIMITS["TITLE"])
        if result.description:
            result.description = truncate(result.description, EMBED_LIMITS["DESCRIPTION"])

        if result.fields:
            fields = result.fields[:EMBED_LIMITS["FIELDS"]]
            result.clear_fields()
            for field in fields:
                result.add_field(
                    name=truncate(field.name or "", EMBED_LIMITS["FIELD_NAME"]),
                    value=truncate(field.value or "", EMBED_LIMITS["FIELD_VALUE"]),
                    inline=bool(field.inline),
                )

        if result.footer.text:
            result.set_footer(
                text=truncate(result.footer.text, EMBED_LIMITS["FOOTER"]),
                icon_url=result.footer.icon_url,
            )
        if result.author.name:
            result.set_author(
                name=truncate(result.author.name, EMBED_LIMITS["AUTHOR"]),
                url=result.author.url,
                icon_url=result.author.icon_url,
            )

        return result

    @staticmethod
    def sanitize_embeds(embeds: Optional[Iterable[EmbedLike]]) -> List[discord.Embed]:
        """Sanitize a list of embeds, preserving order."""
        if not embeds:
            return []
        return [DiscordUtils.sanitize_embed(embed) for embed in embeds]

    @staticmethod
    def chunk_embeds(
        embeds: List[discord.Embed],
        size: int = EMBED_LIMITS["EMBEDS_PER_MESSAGE"],
    ) -> List[List[discord.Embed]]:
        """Split embeds into per-message pages."""
        return chunk(embeds, size)

    @staticmethod
    def is_text_channel(channel: Any) -> bool:
        """Check whether a channel is a standard guild text channel."""
        return channel is not None and getattr(channel, "type", None) == discord.ChannelType.text

    @staticmethod
    def error_code(error: BaseException) -> Optional[int]:
        """
        Get the Discord JSON error code of an API error.

        Args:
            error: Any exception

        Returns:
            The error code, or None for non-API errors
        """
        if isinstance(error, discord.HTTPException):
            return error.code
        return None

    @staticmethod
    def is_expired_interaction(error: BaseException) -> bool:
        """Check whether an error means the interaction token expired."""
        return DiscordUtils.error_code(error) == UNKNOWN_INTERACTION

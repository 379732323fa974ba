"""Tests for embed sanitizing and Discord error helpers."""

from unittest.mock import MagicMock

import discord

from factories import http_error
from utils.discord import EMBED_LIMITS, UNKNOWN_INTERACTION, DiscordUtils


def _long(n: int) -> str:
    return "x" * n


class TestSanitizeEmbed:
    """Tests for DiscordUtils.sanitize_embed()."""

    def test_truncates_text_parts(self):
        embed = discord.Embed(title=_long(300), description=_long(5000))
        embed.set_footer(text=_long(3000), icon_url="https://example.com/f.png")
        embed.set_author(name=_long(300), url="https://example.com", icon_url="https://example.com/a.png")

        result = DiscordUtils.sanitize_embed(embed)

        assert len(result.title) == EMBED_LIMITS["TITLE"]
        assert result.title.endswith("...")
        assert len(result.description) == EMBED_LIMITS["DESCRIPTION"]
        assert len(result.footer.text) == EMBED_LIMITS["FOOTER"]
        assert result.footer.icon_url == "https://example.com/f.png"
        assert len(result.author.name) == EMBED_LIMITS["AUTHOR"]
        assert result.author.url == "https://example.com"

    def test_caps_fields(self):
        embed = discord.Embed()
        for i in range(30):
            embed.add_field(name=f"{i}" + _long(300), value=_long(2000), inline=i % 2 == 0)

        result = DiscordUtils.sanitize_embed(embed)

        assert len(result.fields) == EMBED_LIMITS["FIELDS"]
        assert result.fields[0].name.startswith("0")
        assert result.fields[24].name.startswith("24")
        assert all(len(field.name) == EMBED_LIMITS["FIELD_NAME"] for field in result.fields)
        assert all(len(field.value) == EMBED_LIMITS["FIELD_VALUE"] for field in result.fields)
        assert result.fields[0].inline is True
        assert result.fields[1].inline is False

    def test_leaves_short_embed_alone(self):
        embed = discord.Embed(title="Title", description="Body", colour=discord.Colour.blue())
        embed.add_field(name="n", value="v")

        result = DiscordUtils.sanitize_embed(embed)

        assert result.to_dict() == embed.to_dict()

    def test_does_not_mutate_input(self):
        embed = discord.Embed(title=_long(300))
        DiscordUtils.sanitize_embed(embed)
        assert len(embed.title) == 300

    def test_accepts_dicts(self):
        result = DiscordUtils.sanitize_embed({"title": _long(300), "type": "rich"})
        assert isinstance(result, discord.Embed)
        assert len(result.title) == EMBED_LIMITS["TITLE"]

    def test_sanitize_embeds_handles_empty(self):
        assert DiscordUtils.sanitize_embeds(None) == []
        assert DiscordUtils.sanitize_embeds([]) == []


def test_chunk_embeds_pages_of_ten():
    embeds = [discord.Embed(title=str(i)) for i in range(23)]
    pages = DiscordUtils.chunk_embeds(embeds)

    assert [len(page) for page in pages] == [10, 10, 3]
    assert [embed.title for page in pages for embed in page] == [str(i) for i in range(23)]


def test_is_text_channel():
    text = MagicMock(type=discord.ChannelType.text)
    thread = MagicMock(type=discord.ChannelType.public_thread)

    assert DiscordUtils.is_text_channel(text)
    assert not DiscordUtils.is_text_channel(thread)
    assert not DiscordUtils.is_text_channel(None)


def test_error_code():
    assert DiscordUtils.error_code(http_error(404, UNKNOWN_INTERACTION)) == UNKNOWN_INTERACTION
    assert DiscordUtils.error_code(RuntimeError("boom")) is None


def test_is_expired_interaction():
    assert DiscordUtils.is_expired_interaction(http_error(404, UNKNOWN_INTERACTION, "Unknown interaction"))
    assert not DiscordUtils.is_expired_interaction(http_error(403, 50013, "Missing Permissions"))
    assert not DiscordUtils.is_expired_interaction(ValueError())

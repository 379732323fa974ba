"""
Utility modules for the bot.
"""

from .logger import get_logger, set_log_level, setup_logging
from .discord import EMBED_LIMITS, DiscordUtils
from .error_handler import ErrorHandler, get_error_handler
from .files import get_file_paths, get_file_paths_async
from .text import chunk, grapheme_length, truncate

__all__ = [
    "get_logger",
    "set_log_level",
    "setup_logging",
    "EMBED_LIMITS",
    "DiscordUtils",
    "ErrorHandler",
    "get_error_handler",
    "get_file_paths",
    "get_file_paths_async",
    "chunk",
    "grapheme_length",
    "truncate",
]

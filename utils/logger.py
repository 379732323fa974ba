"""
Logging utilities for the bot.
Uses Rich for colored console output.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom theme for logging
CUSTOM_THEME = Theme({
    "logging.level.debug": "dim cyan",
    "logging.level.info": "blue",
    "logging.level.warning": "yellow",
    "logging.level.error": "red",
})

console = Console(theme=CUSTOM_THEME)

_level = logging.INFO
_loggers: Dict[str, logging.Logger] = {}


def setup_logging(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Set up a logger with RichHandler.

    Args:
        name: Logger name
        level: Logging level (default: module level, INFO unless changed)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level is None:
        level = _level

    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers = []

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    _loggers[name] = logger

    return logger


def set_log_level(level: int) -> None:
    """
    Change the level of every logger created through this module.

    Args:
        level: New logging level
    """
    global _level
    _level = level
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance, creating it on first use."""
    logger = _loggers.get(name)
    if logger is None:
        logger = setup_logging(name)
    return logger

"""
Discord command bot: prefix and slash commands over discord.py.
"""

__version__ = "1.0.0"
__description__ = "Discord command bot using discord.py"

__all__ = ["__version__"]

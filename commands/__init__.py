"""
Command definitions, discovered and registered at startup.

Each public module exports ``command`` (a bot.registry.Command).
"""

"""
Event bindings, discovered and bound at startup.
"""

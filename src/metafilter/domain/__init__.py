"""Domain layer — rules, rule sets, the applier, and predefined tables.

This layer depends only on stdlib.
It must never import from services, plugins, commands, or config.
"""

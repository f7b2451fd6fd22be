"""Subcommand modules for metafilter.

Provides register_commands() which uses deferred imports to keep
``metafilter --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from metafilter.commands.clean import clean
    from metafilter.commands.tables import rules, tables

    cli.add_command(clean)
    cli.add_command(tables)
    cli.add_command(rules)

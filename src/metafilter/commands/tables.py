"""Commands: list rule tables and show the rules inside one."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metafilter.commands._base import MetafilterCommand

if TYPE_CHECKING:
    from metafilter.commands._context import AppContext


@click.command(
    cls=MetafilterCommand,
    examples="""\
  metafilter tables
  metafilter -q tables
  metafilter --json tables""",
)
@click.pass_obj
def tables(app: AppContext) -> None:
    """List every rule table available by name."""
    app.emit(app.service.list_tables())


@click.command(
    cls=MetafilterCommand,
    examples="""\
  metafilter rules remastered
  metafilter --json rules youtube""",
)
@click.argument("name")
@click.pass_obj
def rules(app: AppContext, name: str) -> None:
    """Show the rules in table NAME, in application order."""
    app.emit(app.service.show_table(name))

"""Command: clean metadata strings with rule tables."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metafilter.commands._base import MetafilterCommand

if TYPE_CHECKING:
    from metafilter.commands._context import AppContext


@click.command(
    cls=MetafilterCommand,
    examples="""\
  metafilter clean "Artist - Track (Official Video)"
  metafilter clean -t remastered -t trim-whitespace "Let It Be (Remastered 2009)"
  metafilter clean --until-stable "  Track [HD] (Official Audio)  "
  cat titles.txt | metafilter clean -t youtube -t trim-symbols
  metafilter --json clean "Song (feat. Someone)" -t feature""",
)
@click.argument("texts", nargs=-1)
@click.option(
    "-t",
    "--table",
    "tables",
    multiple=True,
    help="Rule table to apply; repeat to chain tables in order. Defaults to [filter] tables.",
)
@click.option(
    "--until-stable",
    is_flag=True,
    help="Repeat the rules until the text stops changing. Defaults to [filter] until_stable.",
)
@click.pass_obj
def clean(
    app: AppContext,
    texts: tuple[str, ...],
    tables: tuple[str, ...],
    until_stable: bool,
) -> None:
    """Clean TEXTS, or each line of stdin when no TEXTS are given."""
    if not texts:
        stdin = click.get_text_stream("stdin")
        texts = tuple(line.rstrip("\r\n") for line in stdin)

    app.emit(
        app.service.clean(
            texts,
            tables=list(tables) if tables else None,
            until_stable=True if until_stable else None,
        )
    )

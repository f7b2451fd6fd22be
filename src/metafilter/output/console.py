"""Rich Console factory and theme for metafilter output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MF_THEME = Theme(
    {
        "mf.ok": "bold green",
        "mf.error": "bold red",
        "mf.op": "bold cyan",
        "mf.name": "bold",
        "mf.pattern": "yellow",
        "mf.replacement": "green",
        "mf.dim": "dim",
        "mf.source.builtin": "blue",
        "mf.source.plugin": "magenta",
        "mf.source.config": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_source(source: str) -> str:
    """Return the theme style for a table source (builtin, plugin, config)."""
    return f"mf.source.{source}" if source in ("builtin", "plugin", "config") else "mf.dim"

"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables) or machines
(--json). ``clean`` output is always one cleaned string per line in human
mode so it can be piped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from metafilter.output.console import create_console, get_output, style_for_source

if TYPE_CHECKING:
    from metafilter.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags, frozen after construction."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    no_color: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if not result.ok:
        return _format_error(result, verbose=settings.verbose)
    if result.op == "clean":
        return "\n".join(item["output"] for item in result.data.get("items", []))
    if settings.quiet:
        return _format_quiet(result)
    if result.op == "list_tables":
        return _render_tables(result, no_color=settings.no_color)
    if result.op == "show_table":
        return _render_rules(result, no_color=settings.no_color)
    return f"OK: {result.op}"


def _format_error(result: ServiceResult, *, verbose: bool) -> str:
    if result.error is None:
        return f"ERROR: {result.op}: Unknown error"
    lines = [f"ERROR: {result.op}: {result.error.message}"]
    if verbose:
        lines.extend(f"  {key}: {value}" for key, value in result.error.detail.items())
    return "\n".join(lines)


def _format_quiet(result: ServiceResult) -> str:
    if result.op == "list_tables":
        return "\n".join(item["name"] for item in result.data.get("items", []))
    if result.op == "show_table":
        return "\n".join(rule["pattern"] for rule in result.data.get("rules", []))
    return ""


def _render_tables(result: ServiceResult, *, no_color: bool) -> str:
    console = create_console(no_color=no_color)
    table = Table(title="Rule tables", title_justify="left")
    table.add_column("Name", style="mf.name")
    table.add_column("Source")
    table.add_column("Rules", justify="right")
    for item in result.data.get("items", []):
        count: Any = item.get("rules")
        table.add_row(
            Text(item["name"]),
            Text(item["source"], style=style_for_source(item["source"])),
            Text("?" if count is None else str(count)),
        )
    console.print(table)
    return get_output(console).rstrip("\n")


def _render_rules(result: ServiceResult, *, no_color: bool) -> str:
    console = create_console(no_color=no_color)
    table = Table(title=Text(f"Rules in {result.data.get('name')}"), title_justify="left")
    table.add_column("#", justify="right", style="mf.dim")
    table.add_column("Pattern", style="mf.pattern", overflow="fold")
    table.add_column("Replacement", style="mf.replacement", overflow="fold")
    for position, rule in enumerate(result.data.get("rules", []), start=1):
        pattern = rule["pattern"]
        if rule.get("literal"):
            pattern = f"{pattern} (literal)"
        table.add_row(str(position), Text(pattern), Text(repr(rule["replacement"])))
    console.print(table)
    return get_output(console).rstrip("\n")

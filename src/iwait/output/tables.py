"""Rich table rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.markup import escape
from rich.table import Table

from iwait.models.result import WaitResult


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    show_lines: bool = False,
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title, show_lines=show_lines)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(escape(str(cell)) if cell is not None else "" for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Option", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)) if value is not None else "")
    return table


def result_table(result: WaitResult, *, title: str | None = None) -> Table:
    """One row per resource with its final readiness and last error."""
    table = Table(title=title, caption=f"{result.elapsed:.0f} ms")
    table.add_column("Resource", no_wrap=True)
    table.add_column("Status")
    table.add_column("Error", style="dim")
    for resource in result.ready:
        table.add_row(escape(resource), "[green]ready[/]", "")
    for resource in result.not_ready:
        error = result.errors.get(resource)
        table.add_row(
            escape(resource), "[red]not ready[/]", escape(str(error)) if error else "",
        )
    return table

"""Display and formatting functions for linctl CLI."""

from __future__ import annotations

from typing import Any

import typer

from linctl.json_path import get_list, get_str
from linctl.text import truncate


def _render_table(table: Any) -> str:
    """Render a Rich table to a string."""
    from io import StringIO

    from rich.console import Console

    string_io = StringIO()
    console = Console(file=string_io, force_terminal=False, width=200)
    console.print(table)
    return string_io.getvalue().rstrip()


def format_roadmap_table(roadmaps: list[Any], max_width: int | None) -> str:
    """Format roadmaps as an aligned table using Rich.

    Args:
        roadmaps: Roadmap documents (``id``, ``name``, ``description``,
            ``projects.nodes``)
        max_width: Truncation width for name and description cells

    Returns:
        Formatted table string, or empty string if there are no roadmaps
    """
    from rich import box
    from rich.markup import escape
    from rich.table import Table

    if not roadmaps:
        return ""

    table = Table(
        show_header=True,
        header_style="bold",
        box=box.ROUNDED,
        pad_edge=False,
        show_edge=False,
    )
    table.add_column("ID", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Description", no_wrap=True)
    table.add_column("Projects", no_wrap=True, justify="right")

    for roadmap in roadmaps:
        description = get_str(roadmap, ("description",), "-") or "-"
        table.add_row(
            get_str(roadmap, ("id",)),
            escape(truncate(get_str(roadmap, ("name",)), max_width)),
            escape(truncate(description, max_width)),
            str(len(get_list(roadmap, ("projects", "nodes")))),
        )

    return _render_table(table)


def success_mark() -> str:
    """Green ``+`` used in front of mutation confirmations."""
    return typer.style("+", fg="green")


def dry_run_banner(text: str) -> str:
    """Style a dry-run heading."""
    return typer.style(f"[DRY RUN] {text}", fg="yellow", bold=True)

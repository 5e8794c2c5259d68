"""Export commands for linctl CLI."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from linctl.errors import LinctlError
from linctl.export import (
    CSV_QUERY,
    MARKDOWN_QUERY,
    build_filter,
    write_csv,
    write_markdown,
)
from linctl.json_path import get_list

from ._helpers import SortedGroup, get_client
from ._json_state import echo_error

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TextIO

# Sub-app for 'linctl export' subcommands
export_app = typer.Typer(
    help="Export issues to CSV or Markdown.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _export(
    query: str,
    issue_filter: dict[str, Any],
    writer: Callable[[list[Any], TextIO], None],
    file: str | None,
) -> None:
    """Fetch issues and write them to ``file`` or stdout."""
    try:
        client = get_client()
        result = client.query(query, {"filter": issue_filter})
        issues = get_list(result, ("data", "issues", "nodes"))

        if file:
            try:
                with Path(file).open("w", encoding="utf-8", newline="") as out:
                    writer(issues, out)
            except OSError as e:
                echo_error(f"Failed to write {file}: {e}")
                raise typer.Exit(1) from None
            typer.echo(f"Exported {len(issues)} issues to {file}", err=True)
        else:
            writer(issues, sys.stdout)
            sys.stdout.flush()
    except LinctlError as e:
        echo_error(str(e))
        raise typer.Exit(1) from None


def register(app: typer.Typer) -> None:
    """Register export commands."""
    app.add_typer(export_app, name="export")

    @export_app.command("csv")
    def export_csv(
        team: str | None = typer.Option(None, "--team", "-t", help="Team key to export"),
        file: str | None = typer.Option(
            None,
            "--file",
            "-f",
            help="Output file (default: stdout)",
        ),
        include_completed: bool = typer.Option(
            False,
            "--include-completed",
            help="Include completed issues",
        ),
    ) -> None:
        """Export issues to CSV."""
        _export(CSV_QUERY, build_filter(team, include_completed), write_csv, file)

    @export_app.command("markdown")
    def export_markdown(
        team: str | None = typer.Option(None, "--team", "-t", help="Team key to export"),
        file: str | None = typer.Option(
            None,
            "--file",
            "-f",
            help="Output file (default: stdout)",
        ),
    ) -> None:
        """Export open issues to Markdown, grouped by status."""
        _export(MARKDOWN_QUERY, build_filter(team), write_markdown, file)

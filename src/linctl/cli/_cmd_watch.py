"""Watch commands for linctl CLI."""

from __future__ import annotations

import threading

import typer

from linctl.config import get_watch_interval
from linctl.errors import LinctlError
from linctl.watch import (
    CollectionTarget,
    EntityTarget,
    EventEmitter,
    WatchSession,
    WatchTarget,
)

from ._helpers import SortedGroup, get_client, get_config
from ._json_state import echo_error, is_json_output

# Sub-app for 'linctl watch' subcommands
watch_app = typer.Typer(
    help="Poll Linear and print changes as they happen.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _run_watch(
    target: WatchTarget,
    interval: int | None,
    json_output: bool,
    banner: str,
    fallback_id: str | None = None,
) -> None:
    """Run a watch session until interrupted or a poll fails."""
    try:
        config = get_config()
        client = get_client(config)
        seconds = interval if interval is not None else get_watch_interval(config)
        emitter = EventEmitter(
            json_output=is_json_output(json_output),
            fallback_id=fallback_id,
        )
        session = WatchSession(
            client,
            target,
            emitter,
            interval=seconds,
            cancel=threading.Event(),
        )
        typer.echo(f"{banner} (Ctrl+C to stop)...\n", err=True)
        session.run()
    except KeyboardInterrupt:
        typer.echo("Stopped watching.", err=True)
    except LinctlError as e:
        echo_error(str(e))
        raise typer.Exit(1) from None


def register(app: typer.Typer) -> None:
    """Register watch commands."""
    app.add_typer(watch_app, name="watch")

    @watch_app.command("issue")
    def watch_issue(
        issue_id: str = typer.Argument(
            ...,
            help="Issue id or identifier (e.g. ENG-123)",
        ),
        interval: int | None = typer.Option(
            None,
            "--interval",
            "-i",
            min=1,
            help="Seconds between polls (default: watch_interval from config)",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Watch one issue and print each update.

        The current state is printed once, then a line (or JSON record) is
        printed whenever the issue's updatedAt changes. The watch stops with
        an error if the issue disappears.

        Examples:
            linctl watch issue ENG-123
            linctl watch issue ENG-123 --interval 10 --json
        """
        _run_watch(
            EntityTarget(issue_id),
            interval,
            json_output,
            banner=f"Watching {issue_id} for changes",
            fallback_id=issue_id,
        )

    @watch_app.command("issues")
    def watch_issues(
        team: str | None = typer.Option(
            None,
            "--team",
            "-t",
            help="Only watch issues of this team key",
        ),
        interval: int | None = typer.Option(
            None,
            "--interval",
            "-i",
            min=1,
            help="Seconds between polls (default: watch_interval from config)",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Watch for newly created issues.

        The first poll records the issues that already exist; after that a
        line (or JSON record) is printed for each issue not seen before.

        Examples:
            linctl watch issues
            linctl watch issues --team ENG --interval 60
        """
        _run_watch(
            CollectionTarget(team),
            interval,
            json_output,
            banner="Watching for new issues",
        )

"""linctl CLI commands for the Linear issue tracker."""

from __future__ import annotations

import typer

from ._helpers import SortedGroup

app = typer.Typer(
    help="linctl - query, export and watch Linear issues from the command line",
    no_args_is_help=True,
    cls=SortedGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log API requests and watch state to stderr",
    ),
) -> None:
    from ._helpers import setup_logging
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_config,
    _cmd_export,
    _cmd_roadmaps,
    _cmd_uploads,
    _cmd_watch,
)

for _mod in (
    _cmd_config,
    _cmd_export,
    _cmd_roadmaps,
    _cmd_uploads,
    _cmd_watch,
):
    _mod.register(app)


def main() -> None:
    """Run the linctl CLI application."""
    app()

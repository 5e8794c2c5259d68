"""Upload download commands for linctl CLI."""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from linctl.constants import UPLOADS_URL_PREFIX
from linctl.errors import LinctlError, UploadError

from ._helpers import SortedGroup, get_client
from ._json_state import echo_error

# Sub-app for 'linctl uploads' subcommands
uploads_app = typer.Typer(
    help="Download files from Linear's upload storage.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def validate_upload_url(url: str) -> None:
    """Reject URLs outside Linear's upload storage.

    Raises:
        UploadError: If the URL is not a Linear upload URL
    """
    if not url.startswith(UPLOADS_URL_PREFIX):
        msg = (
            "Invalid URL: expected Linear upload URL starting with "
            f"'{UPLOADS_URL_PREFIX}'"
        )
        raise UploadError(msg)


def register(app: typer.Typer) -> None:
    """Register uploads commands."""
    app.add_typer(uploads_app, name="uploads")

    def fetch(
        url: str = typer.Argument(
            ...,
            help="The Linear upload URL (e.g. https://uploads.linear.app/...)",
        ),
        file: str | None = typer.Option(
            None,
            "--file",
            "-f",
            help="Output file path (default: stdout)",
        ),
    ) -> None:
        """Fetch an upload from Linear's upload storage."""
        try:
            validate_upload_url(url)
            client = get_client()
            if file:
                try:
                    with Path(file).open("wb") as out:
                        written = client.fetch_to_writer(url, out)
                except OSError as e:
                    msg = f"Failed to create file: {file} ({e})"
                    raise UploadError(msg) from e
                typer.echo(f"Downloaded {written} bytes to {file}", err=True)
            else:
                written = client.fetch_to_writer(url, sys.stdout.buffer)
                sys.stdout.buffer.flush()
                typer.echo(f"Downloaded {written} bytes", err=True)
        except LinctlError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

    uploads_app.command("fetch")(fetch)
    uploads_app.command("get", hidden=True)(fetch)

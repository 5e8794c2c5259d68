"""Shared infrastructure for linctl CLI commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from typer.core import TyperGroup

from linctl.api import LinearClient
from linctl.config import load_config

if TYPE_CHECKING:
    import click


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def setup_logging(verbose: bool) -> None:
    """Route linctl log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG when True, otherwise only warnings and errors
    """
    from rich.console import Console
    from rich.logging import RichHandler

    logger = logging.getLogger("linctl")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)


def get_config() -> dict[str, Any]:
    """Load the user's linctl configuration."""
    return load_config()


def get_client(config: dict[str, Any] | None = None) -> LinearClient:
    """Build a Linear client from the configuration.

    Raises:
        ConfigError: If no API key is configured
    """
    return LinearClient.from_config(config if config is not None else get_config())

"""Configuration management commands for linctl CLI."""

from __future__ import annotations

from typing import Any

import typer

from linctl.config import (
    KNOWN_KEYS,
    coerce_value,
    get_config_path,
    load_config,
    save_config,
)
from linctl.errors import ConfigError

from ._helpers import SortedGroup
from ._json_state import echo_error, echo_json, is_json_output

# Sub-app for 'linctl config' subcommands
config_app = typer.Typer(
    help="Manage linctl configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)

# Keys whose values are never printed in full
_SECRET_KEYS = frozenset({"api_key"})


def mask_value(key: str, value: Any) -> Any:
    """Hide all but the last four characters of secret values."""
    if key not in _SECRET_KEYS or not isinstance(value, str):
        return value
    if len(value) <= 4:
        return "****"
    return "*" * 8 + value[-4:]


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(..., help="Configuration key to set"),
        value: str = typer.Argument(..., help="Value to set"),
    ) -> None:
        """Set a configuration value."""
        try:
            coerced = coerce_value(key, value)
        except ConfigError as e:
            echo_error(str(e))
            raise typer.Exit(1) from None

        config = load_config()
        config[key] = coerced
        save_config(config)
        typer.echo(f"Set {key} = {mask_value(key, coerced)}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(..., help="Configuration key to read"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        config = load_config()
        if key not in config:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        val = mask_value(key, config[key])
        if is_json_output(json_output):
            echo_json({key: val})
        else:
            typer.echo(val)

    @config_app.command("list")
    def config_list(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all configuration values."""
        config = {k: mask_value(k, v) for k, v in load_config().items()}
        if is_json_output(json_output):
            echo_json(config, pretty=True)
        elif not config:
            typer.echo(f"No configuration values set ({get_config_path()}).")
        else:
            for k, v in sorted(config.items()):
                typer.echo(f"{k} = {v}")

    @config_app.command("keys")
    def config_keys(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all available configuration keys and their descriptions."""
        if is_json_output(json_output):
            echo_json(KNOWN_KEYS, pretty=True)
            return

        from rich import box
        from rich.console import Console
        from rich.table import Table

        table = Table(
            show_header=True,
            header_style="bold",
            box=box.ROUNDED,
            pad_edge=False,
            show_edge=False,
        )
        table.add_column("Key", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Default", no_wrap=True)
        table.add_column("Description", overflow="fold")

        for key, info in KNOWN_KEYS.items():
            table.add_row(key, info["type"], str(info["default"]), info["description"])

        Console().print(table)

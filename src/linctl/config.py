"""Configuration file handling for linctl."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from linctl.constants import (
    API_KEY_ENV,
    CONFIG_DIRNAME,
    CONFIG_FILENAME,
    CONFIG_PATH_ENV,
    DEFAULT_API_URL,
    DEFAULT_MAX_WIDTH,
    DEFAULT_TIMEOUT,
    DEFAULT_WATCH_INTERVAL,
)
from linctl.errors import ConfigError

# All known config keys: type, description and default
KNOWN_KEYS: dict[str, dict[str, Any]] = {
    "api_key": {
        "type": "str",
        "description": f"Linear API key (the {API_KEY_ENV} env var takes precedence)",
        "default": "(none)",
    },
    "api_url": {
        "type": "str",
        "description": "GraphQL endpoint",
        "default": DEFAULT_API_URL,
    },
    "timeout": {
        "type": "float",
        "description": "Per-request timeout in seconds",
        "default": DEFAULT_TIMEOUT,
    },
    "watch_interval": {
        "type": "int",
        "description": "Default polling interval for watch commands, in seconds",
        "default": DEFAULT_WATCH_INTERVAL,
    },
    "max_width": {
        "type": "int",
        "description": "Maximum width of truncated table cells",
        "default": DEFAULT_MAX_WIDTH,
    },
}


def get_config_path() -> Path:
    """Get the path to the config file.

    Precedence:
    1. The ``LINCTL_CONFIG`` environment variable
    2. ``$XDG_CONFIG_HOME/linctl/config.toml``
    3. ``~/.config/linctl/config.toml``

    Returns:
        Path to config.toml (it may not exist yet)
    """
    explicit = os.environ.get(CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit)

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from the config file.

    Args:
        config_path: Explicit config file (default: ``get_config_path()``)

    Returns:
        Configuration dictionary, or empty dict if no readable config exists
    """
    path = config_path or get_config_path()
    if not path.exists():
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to the config file.

    Args:
        config: Configuration dictionary to save
        config_path: Explicit config file (default: ``get_config_path()``)
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config, f)


def coerce_value(key: str, value: Any) -> Any:
    """Coerce a value to the type declared for a known key.

    Accepts the raw string from ``linctl config set`` as well as the value
    already parsed out of config.toml, which may have been edited by hand.

    Raises:
        ConfigError: If the key is unknown or the value is not a valid number
            of the declared type
    """
    info = KNOWN_KEYS.get(key)
    if info is None:
        known = ", ".join(KNOWN_KEYS)
        msg = f"Unknown config key '{key}'. Known keys: {known}"
        raise ConfigError(msg)

    try:
        if info["type"] == "int":
            # TOML booleans and fractional floats are not valid counts
            fractional = isinstance(value, float) and not value.is_integer()
            if isinstance(value, bool) or fractional:
                raise ValueError(value)
            number = int(value)
            if number < 1:
                msg = f"Value for '{key}' must be at least 1"
                raise ConfigError(msg)
            return number
        if info["type"] == "float":
            if isinstance(value, bool):
                raise ValueError(value)
            seconds = float(value)
            if seconds <= 0:
                msg = f"Value for '{key}' must be positive"
                raise ConfigError(msg)
            return seconds
    except (TypeError, ValueError):
        msg = f"Invalid {info['type']} value '{value}' for key '{key}'"
        raise ConfigError(msg) from None
    return value


def get_api_key(config: dict[str, Any]) -> str:
    """Resolve the API key from the environment or the config.

    Raises:
        ConfigError: If no API key is configured
    """
    api_key = os.environ.get(API_KEY_ENV) or config.get("api_key")
    if not api_key:
        msg = (
            f"No API key configured. Set {API_KEY_ENV} or run "
            "'linctl config set api_key <key>'."
        )
        raise ConfigError(msg)
    return str(api_key)


def get_watch_interval(config: dict[str, Any]) -> int:
    """Return the configured default watch interval in seconds.

    Raises:
        ConfigError: If the stored value is not an integer of at least 1
    """
    value = config.get("watch_interval", DEFAULT_WATCH_INTERVAL)
    return coerce_value("watch_interval", value)


def get_max_width(config: dict[str, Any]) -> int:
    """Return the configured maximum table cell width."""
    return coerce_value("max_width", config.get("max_width", DEFAULT_MAX_WIDTH))


def get_timeout(config: dict[str, Any]) -> float:
    """Return the configured per-request timeout in seconds."""
    return coerce_value("timeout", config.get("timeout", DEFAULT_TIMEOUT))

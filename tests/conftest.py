"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from linctl.cli._json_state import set_json_flag
from linctl.constants import API_KEY_ENV, CONFIG_PATH_ENV


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point linctl at a throwaway config file and clear ambient credentials."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv(CONFIG_PATH_ENV, str(config_path))
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    return config_path


@pytest.fixture(autouse=True)
def _reset_json_flag() -> None:
    """Reset global JSON output state between tests."""
    set_json_flag(False)


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Provide an API key through the environment."""
    monkeypatch.setenv(API_KEY_ENV, "lin_api_test_key")
    return "lin_api_test_key"

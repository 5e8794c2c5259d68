"""Tests for config module."""

from pathlib import Path

import pytest

from linctl.config import (
    KNOWN_KEYS,
    coerce_value,
    get_api_key,
    get_config_path,
    get_max_width,
    get_timeout,
    get_watch_interval,
    load_config,
    save_config,
)
from linctl.constants import (
    CONFIG_PATH_ENV,
    DEFAULT_MAX_WIDTH,
    DEFAULT_TIMEOUT,
    DEFAULT_WATCH_INTERVAL,
)
from linctl.errors import ConfigError


class TestGetConfigPath:
    """Tests for config path resolution."""

    def test_explicit_env(self, isolated_config: Path) -> None:
        """LINCTL_CONFIG wins."""
        assert get_config_path() == isolated_config

    def test_xdg_config_home(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """XDG_CONFIG_HOME is used when no explicit path is set."""
        monkeypatch.delenv(CONFIG_PATH_ENV)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "linctl" / "config.toml"

    def test_home_fallback(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """~/.config is used as the last resort."""
        monkeypatch.delenv(CONFIG_PATH_ENV)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_path() == tmp_path / ".config" / "linctl" / "config.toml"


class TestLoadSaveConfig:
    """Tests for reading and writing the config file."""

    def test_missing_file_is_empty(self) -> None:
        """No file means an empty config."""
        assert load_config() == {}

    def test_roundtrip_creates_directory(self, isolated_config: Path) -> None:
        """Saving creates the parent directory and can be read back."""
        save_config({"api_key": "k", "watch_interval": 10})

        assert isolated_config.exists()
        assert load_config() == {"api_key": "k", "watch_interval": 10}

    def test_invalid_toml_is_empty(self, isolated_config: Path) -> None:
        """A corrupt file is treated as an empty config."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("this is = = not toml")

        assert load_config() == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path overrides the resolved one."""
        path = tmp_path / "elsewhere.toml"
        save_config({"max_width": 20}, path)

        assert load_config(path) == {"max_width": 20}
        assert load_config() == {}


class TestCoerceValue:
    """Tests for value coercion."""

    def test_string_key(self) -> None:
        """String keys keep their value."""
        assert coerce_value("api_key", "lin_api_x") == "lin_api_x"

    def test_int_key(self) -> None:
        """Integer keys are parsed."""
        assert coerce_value("watch_interval", "15") == 15

    def test_float_key(self) -> None:
        """Float keys are parsed."""
        assert coerce_value("timeout", "2.5") == 2.5

    def test_invalid_int(self) -> None:
        """Non-numeric values are rejected."""
        with pytest.raises(ConfigError, match="Invalid int value"):
            coerce_value("watch_interval", "soon")

    def test_non_positive_int(self) -> None:
        """Intervals below one second are rejected."""
        with pytest.raises(ConfigError, match="at least 1"):
            coerce_value("watch_interval", "0")

    def test_non_positive_float(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(ConfigError, match="must be positive"):
            coerce_value("timeout", "-1")

    def test_unknown_key(self) -> None:
        """Unknown keys are rejected with the list of known keys."""
        with pytest.raises(ConfigError, match="Unknown config key 'colour'"):
            coerce_value("colour", "red")

    def test_every_known_key_documented(self) -> None:
        """Each key carries a type, description and default."""
        for info in KNOWN_KEYS.values():
            assert {"type", "description", "default"} <= set(info)


class TestAccessors:
    """Tests for typed config accessors."""

    def test_api_key_from_env(self, api_key: str) -> None:
        """The environment wins over the config file."""
        assert get_api_key({"api_key": "other"}) == api_key

    def test_api_key_from_config(self) -> None:
        """The config file is used without an env var."""
        assert get_api_key({"api_key": "other"}) == "other"

    def test_api_key_missing(self) -> None:
        """No key anywhere is an error."""
        with pytest.raises(ConfigError, match="LINEAR_API_KEY"):
            get_api_key({})

    def test_defaults(self) -> None:
        """Accessors fall back to defaults."""
        assert get_watch_interval({}) == DEFAULT_WATCH_INTERVAL
        assert get_max_width({}) == DEFAULT_MAX_WIDTH
        assert get_timeout({}) == DEFAULT_TIMEOUT

    def test_configured_values(self) -> None:
        """Accessors read configured values."""
        assert get_watch_interval({"watch_interval": 5}) == 5
        assert get_max_width({"max_width": 12}) == 12
        assert get_timeout({"timeout": 5}) == 5.0

    @pytest.mark.parametrize("value", [0, -5, "soon", 2.5, True])
    def test_invalid_stored_interval(self, value: object) -> None:
        """Hand-edited intervals that are not whole seconds >= 1 are rejected."""
        with pytest.raises(ConfigError, match="watch_interval"):
            get_watch_interval({"watch_interval": value})

    def test_integral_float_interval(self) -> None:
        """A TOML float with no fraction is accepted as an int."""
        assert get_watch_interval({"watch_interval": 10.0}) == 10

    def test_invalid_stored_max_width(self) -> None:
        """A max_width below 1 is rejected."""
        with pytest.raises(ConfigError, match="must be at least 1"):
            get_max_width({"max_width": 0})

    @pytest.mark.parametrize("value", [0, -1.5, "fast", False])
    def test_invalid_stored_timeout(self, value: object) -> None:
        """Timeouts must be positive numbers."""
        with pytest.raises(ConfigError, match="timeout"):
            get_timeout({"timeout": value})

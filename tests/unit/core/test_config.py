"""Unit tests for client configuration.

Tests for loading, saving and validating config.toml.
"""

import os
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from renterctl.core.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    RenterConfig,
    config_to_dict,
    load_config,
    require_setting,
    save_config,
)


class TestRenterConfig:
    """Tests for RenterConfig model."""

    def test_defaults(self) -> None:
        """An empty config has no services and the default host set."""
        config = RenterConfig()

        assert config.muse_addr is None
        assert config.shard_addr is None
        assert config.host_set == "default"
        assert config.http_timeout_seconds == 30.0

    def test_rejects_unknown_fields(self) -> None:
        """Typos in setting names are caught."""
        with pytest.raises(ValidationError):
            RenterConfig.model_validate({"muse_address": "localhost:9580"})

    @pytest.mark.parametrize("timeout", [0, -1, 601])
    def test_timeout_bounds(self, timeout: float) -> None:
        """The HTTP timeout must be in (0, 600]."""
        with pytest.raises(ValidationError):
            RenterConfig(http_timeout_seconds=timeout)

    def test_empty_host_set(self) -> None:
        """The host set name cannot be empty."""
        with pytest.raises(ValidationError):
            RenterConfig(host_set="")


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """No config file is the same as an empty one."""
        assert load_config(tmp_path / "config.toml") == RenterConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values in the file override defaults."""
        path = tmp_path / "config.toml"
        path.write_text('muse_addr = "localhost:9580"\nhost_set = "archive"\n')

        config = load_config(path)

        assert config.muse_addr == "localhost:9580"
        assert config.host_set == "archive"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken syntax raises ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("muse_addr = ")

        with pytest.raises(ConfigParseError, match="Invalid TOML syntax"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Values of the wrong type raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text('http_timeout_seconds = "long"\n')

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)


class TestSaveConfig:
    """Tests for save_config function."""

    def test_writes_toml_without_unset_values(self, tmp_path: Path) -> None:
        """Unset settings are omitted since TOML has no null."""
        path = tmp_path / "sub" / "config.toml"

        save_config(RenterConfig(muse_addr="muse:9580"), path)

        data = tomllib.loads(path.read_text())
        assert data["muse_addr"] == "muse:9580"
        assert "shard_addr" not in data
        assert load_config(path).muse_addr == "muse:9580"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """The atomic write leaves only the config file behind."""
        save_config(RenterConfig(), tmp_path / "config.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]

    def test_default_location(self, tmp_path: Path) -> None:
        """Without a path the XDG config directory is used."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            saved = save_config(RenterConfig(host_set="archive"))

        assert saved == tmp_path / "renterctl" / "config.toml"
        assert load_config(saved).host_set == "archive"


class TestHelpers:
    """Tests for config_to_dict and require_setting functions."""

    def test_config_to_dict_drops_none(self) -> None:
        """None values are not serialized."""
        data = config_to_dict(RenterConfig())

        assert "muse_addr" not in data
        assert data["host_set"] == "default"

    def test_require_setting_present(self) -> None:
        """A configured value is returned."""
        assert require_setting(RenterConfig(shard_addr="s:1"), "shard_addr") == "s:1"

    def test_require_setting_missing(self) -> None:
        """An unset value names the setting in the error."""
        with pytest.raises(ConfigNotFoundError, match="No muse_addr specified"):
            require_setting(RenterConfig(), "muse_addr")

"""Client configuration and settings.

This module provides the configuration model and I/O functions for
renterctl. The configuration names the network services the client
talks to and the session backend used to reach storage hosts.

Configuration is stored in ~/.config/renterctl/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from renterctl.core.paths import ensure_config_dir, get_config_path

logger = logging.getLogger(__name__)

DEFAULT_HOST_SET = "default"


class RenterConfig(BaseModel):
    """Configuration for renterctl.

    Attributes:
        muse_addr: Base URL of the contract server.
        shard_addr: Base URL of the host directory / chain server.
        host_set: Name of the host set whose contracts are used.
        session_backend: Name of the registered session backend to use.
            If None, the only installed backend is used.
        http_timeout_seconds: Timeout for requests to muse and SHARD.
    """

    model_config = ConfigDict(extra="forbid")

    muse_addr: Annotated[
        str | None,
        Field(description="Contract server address"),
    ] = None
    shard_addr: Annotated[
        str | None,
        Field(description="SHARD server address"),
    ] = None
    host_set: Annotated[
        str,
        Field(min_length=1, description="Host set name"),
    ] = DEFAULT_HOST_SET
    session_backend: Annotated[
        str | None,
        Field(description="Session backend entry-point name"),
    ] = None
    http_timeout_seconds: Annotated[
        float,
        Field(gt=0, le=600, description="HTTP timeout in seconds (0-600]"),
    ] = 30.0


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when a required configuration value or file is missing."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


def load_config(path: Path | None = None) -> RenterConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: the client proceeds with an empty
    (default) configuration.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated RenterConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", config_path)
        return RenterConfig()
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return RenterConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: RenterConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The RenterConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
        RuntimeError: If the default config directory cannot be created.
    """
    if path is None:
        config_path = ensure_config_dir() / get_config_path().name
    else:
        config_path = path
        config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: RenterConfig) -> dict[str, object]:
    """Convert RenterConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are left out.

    Args:
        config: The RenterConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(exclude_none=True)


def require_setting(config: RenterConfig, name: str) -> str:
    """Return a string setting or fail with a helpful message.

    Args:
        config: Loaded configuration.
        name: Attribute name of the setting (e.g., "muse_addr").

    Returns:
        The configured value.

    Raises:
        ConfigNotFoundError: If the setting is unset or empty.
    """
    value = getattr(config, name)
    if not value:
        msg = f"No {name} specified. Define {name} in {get_config_path()}."
        raise ConfigNotFoundError(msg)
    return str(value)

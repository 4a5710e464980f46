"""Shared types and utilities for CLI commands.

This module provides helpers used across multiple CLI command modules
to avoid code duplication.
"""

from pathlib import Path

import typer

from renterctl.core.config import ConfigError, RenterConfig, load_config
from renterctl.utils.formatting import print_error


def get_config_path(ctx: typer.Context) -> Path | None:
    """Return the config path given with --config, if any."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict):
        return obj.get("config_path")
    return None


def get_config(ctx: typer.Context) -> RenterConfig:
    """Load the configuration for a command or exit with an error.

    Args:
        ctx: Typer context carrying global options.

    Returns:
        Loaded RenterConfig (defaults if no config file exists).

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config(get_config_path(ctx))
    except ConfigError as e:
        print_error(f"Could not load config file: {e}")
        raise typer.Exit(code=1) from e

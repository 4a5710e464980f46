"""CLI commands for renterctl.

This package contains all subcommand implementations.
"""

from renterctl.cli.commands import config, gc, history, info

__all__ = ["config", "gc", "history", "info"]

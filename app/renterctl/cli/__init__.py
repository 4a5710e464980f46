"""CLI package for renterctl.

This package contains the Typer application and all subcommands.
"""

from renterctl.cli.main import app

__all__ = ["app"]

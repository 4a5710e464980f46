"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import logging
import math
import sys

from rich.console import Console
from rich.logging import RichHandler

from renterctl.core.theme import get_theme

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def filesize_units(size: int) -> str:
    """Format a byte count in decimal units.

    The number of decimal places grows with the unit: none for bytes,
    one for KB, two for MB, three for GB, and so on.

    Args:
        size: Size in bytes.

    Returns:
        Human-readable size such as "0 B", "1.5 KB" or "4.19 MB".
    """
    if size <= 0:
        return "0 B"
    i = min(int(math.log10(size) / 3), len(_SIZE_UNITS) - 1)
    return f"{size / 10 ** (3 * i):.{i}f} {_SIZE_UNITS[i]}"


def setup_logging(verbose: bool = False) -> None:
    """Route library logging to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")

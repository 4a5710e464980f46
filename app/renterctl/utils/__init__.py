"""Utility modules for renterctl.

This module exports commonly used utility functions.
"""

from renterctl.utils.formatting import (
    console,
    err_console,
    filesize_units,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)

__all__ = [
    "console",
    "err_console",
    "filesize_units",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "setup_logging",
]

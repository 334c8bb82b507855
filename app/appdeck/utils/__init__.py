"""Utility modules for appdeck.

This module exports commonly used utility functions.
"""

from appdeck.utils.formatting import (
    console,
    create_inventory_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from appdeck.utils.shell import command_exists, default_opener, spawn_detached

__all__ = [
    "command_exists",
    "console",
    "create_inventory_table",
    "default_opener",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "spawn_detached",
]

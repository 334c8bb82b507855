"""CLI commands for appdeck.

This package contains all subcommand implementations.
"""

from appdeck.cli.commands import cache, config, launch, listing, refresh

__all__ = ["cache", "config", "launch", "listing", "refresh"]

"""CLI package for appdeck.

This package contains the Typer application and all subcommands.
"""

from appdeck.cli.main import app

__all__ = ["app"]

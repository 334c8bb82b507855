"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from appdeck import __version__
from appdeck.cli.commands import cache, config, launch, listing, refresh
from appdeck.core.paths import ensure_dirs
from appdeck.utils.formatting import err_console, print_error

# Create main Typer app
app = typer.Typer(
    name="appdeck",
    help="Application inventory and launcher for the desktop.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"appdeck version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library logging to stderr through Rich.

    Args:
        verbose: Show debug messages.
        quiet: Show errors only.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """appdeck - application inventory and launcher.

    Discovers installed applications, groups and categorizes them, and
    keeps the result in a short-lived cache so listings are instant.
    """
    configure_logging(verbose, quiet)

    try:
        ensure_dirs()
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(listing.app, name="list")
app.add_typer(refresh.app, name="refresh")
app.add_typer(cache.app, name="cache")
app.add_typer(config.app, name="config")
app.command(name="launch")(launch.launch_app)


if __name__ == "__main__":
    app()

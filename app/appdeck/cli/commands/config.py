"""Configuration commands."""

from typing import Annotated

import typer

from appdeck.cli.types import load_cli_config
from appdeck.core.config import ConfigError, config_to_dict, get_default_config, save_config
from appdeck.core.paths import get_config_path
from appdeck.inventory.scanner import default_roots
from appdeck.utils.formatting import console, print_error, print_success, print_warning
from appdeck.utils.shell import command_exists, default_opener

app = typer.Typer(
    help="Show or create the configuration file.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config = load_cli_config()
    path = get_config_path()
    source = str(path) if path.exists() else "defaults (no config file)"
    console.print(f"[muted]Source:[/] {source}")

    for key, value in config_to_dict(config).items():
        console.print(f"  [header]{key}[/] = {value}")

    roots = config.scan_roots() or default_roots()
    console.print(f"  [header]effective roots[/] = {', '.join(str(r) for r in roots)}")

    opener = config.opener or default_opener()
    if not command_exists(opener):
        print_warning(f"Launch command '{opener}' was not found in PATH.")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(get_default_config(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")

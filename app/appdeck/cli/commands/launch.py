"""Launch command implementation.

Registered directly on the main app because it takes a positional name.
"""

from typing import Annotated

import typer

from appdeck.cli.types import build_manager, load_cli_config
from appdeck.inventory.search import find_app
from appdeck.utils.formatting import print_error, print_success


def launch_app(
    name: Annotated[str, typer.Argument(help="Application name (case-insensitive).")],
) -> None:
    """Launch an installed application by name as a detached process."""
    config = load_cli_config()
    with build_manager(config) as manager:
        manager.start()
        entries = manager.wait()

        item = find_app(entries, name)
        if item is None:
            print_error(f"No application named '{name}'.")
            raise typer.Exit(code=1)

        if not manager.launch(item):
            print_error(f"Failed to launch {item.name}.")
            raise typer.Exit(code=1)

    print_success(f"Launched {item.name}.")

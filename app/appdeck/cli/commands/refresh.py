"""Refresh command implementation.

Rescans the application roots and rewrites the inventory cache.
"""

from typing import Annotated

import typer

from appdeck.cli.types import build_manager, load_cli_config
from appdeck.models.inventory import iter_apps
from appdeck.utils.formatting import print_success

app = typer.Typer(
    help="Rescan installed applications.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def refresh(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Discard the cached inventory before scanning.",
        ),
    ] = False,
) -> None:
    """Rescan the application roots and update the cache."""
    if ctx.invoked_subcommand is not None:
        return

    config = load_cli_config()
    with build_manager(config) as manager:
        future = manager.force_refresh() if force else manager.refresh()
        entries = future.result()

    app_count = sum(1 for _ in iter_apps(entries))
    print_success(f"Found {app_count} applications ({len(entries)} top-level entries).")

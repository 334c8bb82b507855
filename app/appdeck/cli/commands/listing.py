"""List command implementation.

Shows the application inventory, served from the cache while it is fresh.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from appdeck.cli.types import CategoryChoice, build_manager, load_cli_config
from appdeck.inventory.search import filter_entries
from appdeck.models.inventory import FolderItem, iter_apps
from appdeck.utils.formatting import (
    add_inventory_rows,
    console,
    create_inventory_table,
    print_info,
)

app = typer.Typer(
    help="List installed applications.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def list_apps(
    ctx: typer.Context,
    search: Annotated[
        str,
        typer.Option(
            "--search",
            "-s",
            help="Only show entries whose name contains this text.",
        ),
    ] = "",
    category: Annotated[
        CategoryChoice,
        typer.Option(
            "--category",
            "-c",
            help="Only show entries of this category.",
            case_sensitive=False,
        ),
    ] = CategoryChoice.ALL,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    flat: Annotated[
        bool,
        typer.Option(
            "--flat",
            help="List applications without folder rows.",
        ),
    ] = False,
) -> None:
    """List the application inventory.

    Examples:
        appdeck list                        # Everything, grouped by folder
        appdeck list --search code          # Name contains "code"
        appdeck list --category system      # System applications only
        appdeck list --format json          # Output as JSON
    """
    if ctx.invoked_subcommand is not None:
        return

    config = load_cli_config()
    with build_manager(config) as manager:
        manager.start()
        entries = manager.wait()

    shown = filter_entries(entries, search, category.to_category())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([entry.to_dict() for entry in shown]))
        return

    if not shown:
        print_info("No applications found.")
        return

    table = create_inventory_table()
    add_inventory_rows(table, shown, flat=flat)
    console.print(table)

    app_count = sum(1 for _ in iter_apps(shown))
    folder_count = sum(1 for entry in shown if isinstance(entry, FolderItem))
    console.print(f"\n[muted]{app_count} applications in {folder_count} folders and top level[/]")

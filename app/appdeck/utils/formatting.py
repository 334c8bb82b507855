"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from appdeck.core.theme import get_theme
from appdeck.models.inventory import Category, FolderItem, InventoryEntry


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


def category_style(category: Category) -> str:
    """Return the theme style name of a category."""
    return f"category_{category.value.lower()}"


def create_inventory_table(title: str = "Applications") -> Table:
    """Create a pre-configured table for displaying the inventory.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for inventory display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Name", no_wrap=True)
    table.add_column("Category")
    table.add_column("Identifier", style="muted")
    table.add_column("Path", style="muted", overflow="ellipsis")
    return table


def add_inventory_rows(table: Table, entries: Sequence[InventoryEntry], *, flat: bool = False) -> None:
    """Append inventory entries to a table.

    Folders get a header row followed by their apps, indented. With
    ``flat`` the folder rows are left out and only apps are listed.

    Args:
        table: Table from create_inventory_table().
        entries: Top-level inventory entries.
        flat: List apps only, without folder rows.
    """
    for entry in entries:
        if isinstance(entry, FolderItem):
            if not flat:
                table.add_row(
                    "[folder]■[/]",  # Filled square
                    f"[folder]{entry.name}/[/] [muted]({len(entry.apps)})[/]",
                    f"[{category_style(entry.category)}]{entry.category.value}[/]",
                    "",
                    entry.folder_path,
                )
            indent = "" if flat else "  "
            for app in entry.apps:
                table.add_row(
                    "[app]●[/]",
                    f"{indent}[app]{app.name}[/]",
                    f"[{category_style(app.category)}]{app.category.value}[/]",
                    app.identifier or "-",
                    app.path or "-",
                )
            continue

        table.add_row(
            "[app]●[/]",  # Filled circle
            f"[app]{entry.name}[/]",
            f"[{category_style(entry.category)}]{entry.category.value}[/]",
            entry.identifier or "-",
            entry.path or "-",
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

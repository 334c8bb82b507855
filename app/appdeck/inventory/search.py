"""Search and category filtering over the inventory tree."""

from collections.abc import Iterable

from appdeck.models.inventory import (
    ApplicationItem,
    Category,
    FolderItem,
    InventoryEntry,
    iter_apps,
)


def _matches(name: str, category: Category, query: str, wanted: Category | None) -> bool:
    matches_search = not query or query in name.casefold()
    matches_category = wanted is None or category == wanted
    return matches_search and matches_category


def filter_entries(
    entries: Iterable[InventoryEntry],
    query: str = "",
    category: Category | None = None,
) -> list[InventoryEntry]:
    """Filter entries by a name substring and an exact category.

    A folder is kept when the folder itself matches (all of its apps are
    kept) or when some of its apps match (only those apps are kept).

    Args:
        entries: Top-level inventory entries.
        query: Case-insensitive substring of the name; empty matches all.
        category: Category to keep; None keeps every category.

    Returns:
        Matching entries in their original order.
    """
    needle = query.strip().casefold()
    result: list[InventoryEntry] = []
    for entry in entries:
        if _matches(entry.name, entry.category, needle, category):
            result.append(entry)
            continue
        if isinstance(entry, FolderItem):
            apps = tuple(
                app for app in entry.apps if _matches(app.name, app.category, needle, category)
            )
            if apps:
                result.append(
                    FolderItem(
                        name=entry.name,
                        category=entry.category,
                        apps=apps,
                        folder_path=entry.folder_path,
                    )
                )
    return result


def find_app(entries: Iterable[InventoryEntry], name: str) -> ApplicationItem | None:
    """Find an application by case-insensitive exact name.

    Args:
        entries: Top-level inventory entries.
        name: Application name to look for.

    Returns:
        First matching ApplicationItem (folders searched in place), or None.
    """
    wanted = name.strip().casefold()
    for app in iter_apps(entries):
        if app.name.casefold() == wanted:
            return app
    return None

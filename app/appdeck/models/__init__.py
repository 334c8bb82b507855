"""Data models for appdeck.

This module exports the core data structures used throughout the application.
"""

from appdeck.models.inventory import (
    BUNDLE_SUFFIX,
    ApplicationItem,
    Category,
    FolderItem,
    InventoryEntry,
    entry_from_dict,
    iter_apps,
    sort_entries,
)

__all__ = [
    "BUNDLE_SUFFIX",
    "ApplicationItem",
    "Category",
    "FolderItem",
    "InventoryEntry",
    "entry_from_dict",
    "iter_apps",
    "sort_entries",
]

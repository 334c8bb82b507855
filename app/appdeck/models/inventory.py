"""Inventory models for discovered applications.

This module defines the data structures that make up the inventory tree:
flat application items, folders grouping applications found one level
below a scan root, and the tagged union over both.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

# Recognized suffix of an application bundle directory
BUNDLE_SUFFIX = ".app"


class Category(str, Enum):
    """Fixed set of category labels assigned to applications and folders.

    Attributes:
        SYSTEM: Applications shipped with the operating system.
        DEVELOPMENT: Editors, IDEs and terminals.
        PRODUCTIVITY: Office suites, browsers and collaboration tools.
        ENTERTAINMENT: Media, games and social applications.
        UTILITIES: Everything else (default).
    """

    SYSTEM = "System"
    DEVELOPMENT = "Development"
    PRODUCTIVITY = "Productivity"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"

    @classmethod
    def parse(cls, value: object) -> Category:
        """Parse a stored category label, falling back to UTILITIES.

        Args:
            value: Raw label (any type) read from persisted data.

        Returns:
            Matching Category, or UTILITIES for unknown labels.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.UTILITIES


def new_item_id() -> str:
    """Generate an opaque identity for a newly discovered item."""
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class ApplicationItem:
    """An installed application discovered during a scan.

    Attributes:
        name: Display name (localized name, internal name or filename).
        category: Category assigned by the categorizer.
        identifier: Reverse-domain bundle identifier, "" if unavailable.
        path: Absolute path to the bundle; None only for placeholders.
        id: Identity generated once per discovery.
    """

    kind: ClassVar[str] = "app"

    name: str
    category: Category = Category.UTILITIES
    identifier: str = ""
    path: str | None = None
    id: str = field(default_factory=new_item_id)

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not isinstance(self.name, str):
            msg = f"Application name must be a string, got {type(self.name).__name__}"
            raise ValueError(msg)
        if not self.name:
            msg = "Application name cannot be empty"
            raise ValueError(msg)
        if not isinstance(self.identifier, str):
            msg = f"Bundle identifier must be a string, got {type(self.identifier).__name__}"
            raise ValueError(msg)
        if self.path is not None and not isinstance(self.path, str):
            msg = f"Application path must be a string, got {type(self.path).__name__}"
            raise ValueError(msg)
        if not isinstance(self.id, str):
            msg = f"Item id must be a string, got {type(self.id).__name__}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Tagged dictionary representation of the item.
        """
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "identifier": self.identifier,
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationItem:
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing item data.

        Returns:
            ApplicationItem instance.

        Raises:
            KeyError: If required fields are missing.
            TypeError: If data is not a dictionary.
            ValueError: If a field is empty or has the wrong type.
        """
        _require_dict(data)
        return cls(
            id=data.get("id") or new_item_id(),
            name=data["name"],
            category=Category.parse(data.get("category")),
            identifier=data.get("identifier") or "",
            path=data.get("path"),
        )


@dataclass(frozen=True, slots=True)
class FolderItem:
    """A named group of applications found in one subdirectory of a root.

    Attributes:
        name: Base name of the subdirectory.
        category: Category derived from the folder name or its apps.
        apps: Applications found in the subdirectory (never empty).
        folder_path: Absolute path of the subdirectory.
    """

    kind: ClassVar[str] = "folder"

    name: str
    category: Category
    apps: tuple[ApplicationItem, ...]
    folder_path: str

    def __post_init__(self) -> None:
        """Validate folder data after initialization."""
        if not isinstance(self.name, str) or not isinstance(self.folder_path, str):
            msg = "Folder name and path must be strings"
            raise ValueError(msg)
        if not self.apps:
            msg = f"Folder '{self.name}' must contain at least one application"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Tagged dictionary representation of the folder and its apps.
        """
        return {
            "kind": self.kind,
            "name": self.name,
            "category": self.category.value,
            "folder_path": self.folder_path,
            "apps": [app.to_dict() for app in self.apps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FolderItem:
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing folder data.

        Returns:
            FolderItem instance.

        Raises:
            KeyError: If required fields are missing.
            TypeError: If data or any nested app is not a dictionary.
            ValueError: If the folder has no applications.
        """
        _require_dict(data)
        apps = data["apps"]
        if not isinstance(apps, list):
            msg = f"Folder apps must be a list, got {type(apps).__name__}"
            raise TypeError(msg)
        return cls(
            name=data["name"],
            category=Category.parse(data.get("category")),
            apps=tuple(ApplicationItem.from_dict(app) for app in apps),
            folder_path=data["folder_path"],
        )


def _require_dict(data: Any) -> None:
    if not isinstance(data, dict):
        msg = f"Inventory entry must be a dictionary, got {type(data).__name__}"
        raise TypeError(msg)


# One top-level slot in the launcher grid
InventoryEntry = ApplicationItem | FolderItem


def entry_from_dict(data: dict[str, Any]) -> InventoryEntry:
    """Deserialize a tagged inventory entry.

    Args:
        data: Dictionary produced by ``to_dict()`` of either variant.

    Returns:
        ApplicationItem or FolderItem depending on the ``kind`` tag.

    Raises:
        KeyError: If required fields are missing.
        TypeError: If data is not a dictionary.
        ValueError: If the kind tag is unknown or the data is invalid.
    """
    _require_dict(data)
    kind = data.get("kind")
    if kind == ApplicationItem.kind:
        return ApplicationItem.from_dict(data)
    if kind == FolderItem.kind:
        return FolderItem.from_dict(data)
    msg = f"Unknown inventory entry kind: {kind!r}"
    raise ValueError(msg)


def sort_key(entry: InventoryEntry) -> str:
    """Case-insensitive ordering key for entries and apps."""
    return entry.name.casefold()


def sort_entries(entries: Iterable[InventoryEntry]) -> list[InventoryEntry]:
    """Sort entries by case-insensitive name ascending (stable)."""
    return sorted(entries, key=sort_key)


def iter_apps(entries: Iterable[InventoryEntry]) -> Iterator[ApplicationItem]:
    """Yield every application in the tree, descending into folders.

    Args:
        entries: Top-level inventory entries.

    Yields:
        ApplicationItem instances in tree order.
    """
    for entry in entries:
        if isinstance(entry, FolderItem):
            yield from entry.apps
        else:
            yield entry

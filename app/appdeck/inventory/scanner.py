"""Filesystem scanner for installed applications.

Walks the application roots exactly two levels deep. Bundles directly
inside a root become flat items; plain directories are listed one level
further and the bundles found there become a folder. Nothing is ever
recursed beyond that.
"""

import logging
from enum import Enum
from pathlib import Path

from appdeck.bundles.categorizer import categorize_folder
from appdeck.bundles.reader import BundleReader
from appdeck.models.inventory import (
    BUNDLE_SUFFIX,
    ApplicationItem,
    FolderItem,
    InventoryEntry,
    sort_entries,
)

logger = logging.getLogger(__name__)

SYSTEM_APPLICATIONS_DIR = Path("/System/Applications")
APPLICATIONS_DIR = Path("/Applications")

# Name prefixes of entries skipped at every level
_HIDDEN_PREFIXES: tuple[str, ...] = (".", "~")


class ScanState(str, Enum):
    """Lifecycle of one scan invocation.

    There is no failed state: I/O errors shrink the result instead.
    """

    NOT_STARTED = "not_started"
    SCANNING = "scanning"
    COMPLETED = "completed"


def get_user_applications_dir() -> Path | None:
    """Locate ~/Applications if it exists.

    Returns:
        Path to the user's Applications directory, or None.
    """
    try:
        candidate = Path.home() / "Applications"
    except RuntimeError:
        logger.debug("Cannot determine home directory")
        return None
    return candidate if candidate.is_dir() else None


def default_roots() -> tuple[Path, ...]:
    """Return the platform application roots in scan order.

    Returns:
        /System/Applications, /Applications and, when present,
        ~/Applications.
    """
    roots = [SYSTEM_APPLICATIONS_DIR, APPLICATIONS_DIR]
    user_dir = get_user_applications_dir()
    if user_dir is not None:
        roots.append(user_dir)
    return tuple(roots)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(_HIDDEN_PREFIXES)


class InventoryScanner:
    """Builds the inventory tree from a set of root directories.

    Args:
        roots: Directories to scan in order. Defaults to default_roots(),
            resolved at scan time.
        reader: Bundle reader used for every bundle found.
    """

    def __init__(
        self,
        roots: tuple[Path, ...] | None = None,
        reader: BundleReader | None = None,
    ) -> None:
        self._roots = roots
        self._reader = reader if reader is not None else BundleReader()
        self._state = ScanState.NOT_STARTED

    @property
    def state(self) -> ScanState:
        """State of the most recent scan invocation."""
        return self._state

    @property
    def reader(self) -> BundleReader:
        """Bundle reader shared with icon loading."""
        return self._reader

    def roots(self) -> tuple[Path, ...]:
        """Return the roots the next scan will visit."""
        return self._roots if self._roots is not None else default_roots()

    def scan(self) -> list[InventoryEntry]:
        """Scan all roots and return the sorted inventory tree.

        Non-existent roots are skipped silently. Directories that cannot
        be listed contribute nothing.

        Returns:
            Top-level entries sorted by case-insensitive name.
        """
        self._state = ScanState.SCANNING
        entries: list[InventoryEntry] = []
        try:
            for root in self.roots():
                if not root.is_dir():
                    logger.debug("Skipping missing root: %s", root)
                    continue
                entries.extend(self._scan_root(root))
        finally:
            self._state = ScanState.COMPLETED

        logger.debug("Scan found %d top-level entries", len(entries))
        return sort_entries(entries)

    def _scan_root(self, root: Path) -> list[InventoryEntry]:
        """Scan the direct children of one root.

        Args:
            root: Root directory.

        Returns:
            Flat apps and non-empty folders found in the root.
        """
        entries: list[InventoryEntry] = []
        for child in self._list_dir(root):
            if child.name.endswith(BUNDLE_SUFFIX):
                app = self._reader.read(child)
                if app is not None:
                    entries.append(app)
                continue

            if not self._is_dir(child):
                continue

            folder = self._scan_folder(child)
            if folder is not None:
                entries.append(folder)
        return entries

    def _scan_folder(self, directory: Path) -> FolderItem | None:
        """Collect the bundles directly inside a subdirectory.

        Nested non-bundle directories are ignored.

        Args:
            directory: Subdirectory of a root.

        Returns:
            FolderItem, or None if no bundles were found.
        """
        apps: list[ApplicationItem] = []
        for child in self._list_dir(directory):
            if not child.name.endswith(BUNDLE_SUFFIX):
                continue
            app = self._reader.read(child)
            if app is not None:
                apps.append(app)

        if not apps:
            return None

        apps.sort(key=lambda app: app.name.casefold())
        return FolderItem(
            name=directory.name,
            category=categorize_folder(directory.name, apps),
            apps=tuple(apps),
            folder_path=str(directory.absolute()),
        )

    @staticmethod
    def _list_dir(directory: Path) -> list[Path]:
        """List visible entries of a directory.

        Args:
            directory: Directory to list.

        Returns:
            Sorted visible children, or an empty list if listing fails.
        """
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", directory, e)
            return []
        return [child for child in children if not _is_hidden(child)]

    @staticmethod
    def _is_dir(path: Path) -> bool:
        try:
            return path.is_dir()
        except OSError:
            logger.warning("Cannot determine type of: %s", path)
            return False

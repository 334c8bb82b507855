"""Shared types and factories for CLI commands.

This module is the composition root of the CLI: it loads the
configuration and constructs the store, caches and inventory manager
each command works with.
"""

from enum import Enum

import typer

from appdeck.bundles.reader import BundleReader
from appdeck.core.config import AppdeckConfig, ConfigError, load_config_or_default
from appdeck.core.paths import get_icon_cache_dir, get_wallpaper_cache_dir
from appdeck.core.store import KeyValueStore
from appdeck.images.icons import IconCache
from appdeck.images.wallpaper import WallpaperCache
from appdeck.inventory.cache import InventoryCache
from appdeck.inventory.manager import InventoryManager
from appdeck.inventory.scanner import InventoryScanner
from appdeck.models.inventory import Category
from appdeck.utils.formatting import print_error


class CategoryChoice(str, Enum):
    """Category filter options for CLI commands."""

    ALL = "all"
    SYSTEM = "system"
    DEVELOPMENT = "development"
    PRODUCTIVITY = "productivity"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"

    def to_category(self) -> Category | None:
        """Map the choice to a Category (None for ALL)."""
        if self == CategoryChoice.ALL:
            return None
        return Category(self.value.capitalize())


def load_cli_config() -> AppdeckConfig:
    """Load the configuration or exit with an error message."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def build_reader(config: AppdeckConfig) -> BundleReader:
    """Create the bundle reader configured for display-name lookup."""
    return BundleReader(preferred_localizations=config.preferred_localizations)


def build_manager(config: AppdeckConfig, store: KeyValueStore | None = None) -> InventoryManager:
    """Create an inventory manager wired to the persisted cache.

    Args:
        config: Loaded configuration.
        store: Key-value store to use; the default store when None.

    Returns:
        InventoryManager owning its scan executor.
    """
    scanner = InventoryScanner(roots=config.scan_roots(), reader=build_reader(config))
    cache = InventoryCache(store if store is not None else KeyValueStore())
    return InventoryManager(scanner, cache, opener=config.opener)


def build_icon_cache(config: AppdeckConfig) -> IconCache:
    """Create the icon cache with its disk tier in the cache directory."""
    return IconCache(
        build_reader(config),
        get_icon_cache_dir(),
        icon_size=config.icon_size,
        max_entries=config.icon_memory_entries,
        max_bytes=config.icon_memory_bytes,
    )


def build_wallpaper_cache(config: AppdeckConfig, store: KeyValueStore) -> WallpaperCache:
    """Create the wallpaper cache with its disk tier in the cache directory."""
    return WallpaperCache(
        store,
        get_wallpaper_cache_dir(),
        max_bytes=config.wallpaper_memory_bytes,
    )

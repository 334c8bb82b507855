"""Application inventory: scanning, caching and orchestration.

This module provides the filesystem scanner, the persisted inventory
cache, the manager serving the inventory to the UI layer, and search
helpers over the inventory tree.
"""

from appdeck.inventory.cache import CACHE_EXPIRATION_SECONDS, InventoryCache
from appdeck.inventory.manager import InventoryManager, InventoryState
from appdeck.inventory.scanner import InventoryScanner, ScanState, default_roots
from appdeck.inventory.search import filter_entries, find_app

__all__ = [
    "CACHE_EXPIRATION_SECONDS",
    "InventoryCache",
    "InventoryManager",
    "InventoryScanner",
    "InventoryState",
    "ScanState",
    "default_roots",
    "filter_entries",
    "find_app",
]

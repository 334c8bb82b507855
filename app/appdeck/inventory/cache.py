"""Persisted cache of the most recent inventory scan.

The inventory tree and the time it was stored live under two versioned
keys of the key-value store. A record is served while it is younger
than the expiration interval; corrupt records are discarded and treated
as a miss. Records written by the previous flat-list format are
upconverted once and rewritten in the current format.
"""

import json
import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from appdeck.core.store import KeyValueStore, StoreError
from appdeck.models.inventory import (
    ApplicationItem,
    Category,
    InventoryEntry,
    entry_from_dict,
    sort_entries,
)

logger = logging.getLogger(__name__)

CACHE_EXPIRATION_SECONDS: float = 3600.0

TREE_KEY = "inventory.tree.v2"
STORED_AT_KEY = "inventory.stored_at.v2"

# Flat list format written by earlier releases
LEGACY_TREE_KEY = "CachedInstalledApps"
LEGACY_STORED_AT_KEY = "CacheExpirationDate"


def serialize_entries(entries: Sequence[InventoryEntry]) -> str:
    """Serialize an inventory tree to a compact JSON blob."""
    return json.dumps([entry.to_dict() for entry in entries], separators=(",", ":"))


def deserialize_entries(blob: Any) -> list[InventoryEntry]:
    """Rebuild an inventory tree from a stored blob.

    Args:
        blob: JSON text produced by serialize_entries().

    Returns:
        Inventory entries in stored order.

    Raises:
        json.JSONDecodeError: If the blob is not valid JSON.
        KeyError: If an entry lacks required fields.
        TypeError: If the blob has the wrong shape.
        ValueError: If an entry is invalid.
    """
    if not isinstance(blob, str):
        msg = f"Inventory blob must be a string, got {type(blob).__name__}"
        raise TypeError(msg)
    data = json.loads(blob)
    if not isinstance(data, list):
        msg = "Inventory blob must be a JSON list"
        raise TypeError(msg)
    return [entry_from_dict(item) for item in data]


def _parse_timestamp(value: Any) -> float | None:
    """Interpret a stored timestamp (epoch seconds or ISO 8601)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).timestamp()
        except ValueError:
            return None
    return None


def _legacy_item(data: Any) -> ApplicationItem | None:
    """Convert one flat-format item, or None if it is unusable."""
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    if not isinstance(name, str) or not name:
        return None
    identifier = data.get("bundleIdentifier")
    path = data.get("path")
    return ApplicationItem(
        name=name,
        category=Category.parse(data.get("category")),
        identifier=identifier if isinstance(identifier, str) else "",
        path=path if isinstance(path, str) else None,
    )


class InventoryCache:
    """Time-bounded persisted snapshot of the inventory tree.

    Args:
        store: Key-value store holding the record.
        clock: Source of the current time in epoch seconds.
        expiration_interval: Age in seconds after which a record is stale.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], float] = time.time,
        expiration_interval: float = CACHE_EXPIRATION_SECONDS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._expiration_interval = expiration_interval

    @property
    def expiration_interval(self) -> float:
        """Maximum age in seconds of a servable record."""
        return self._expiration_interval

    def load(self) -> list[InventoryEntry] | None:
        """Load the cached inventory if present, readable and fresh.

        Returns:
            Cached entries, or None on a miss (absent, corrupt or expired).
        """
        entries, stored_at = self._load_current()
        if entries is None:
            legacy = self._load_legacy()
            if legacy is None:
                return None
            entries, stored_at = legacy

        if stored_at is None or self._clock() - stored_at >= self._expiration_interval:
            logger.debug("Inventory cache expired")
            self._discard(TREE_KEY, STORED_AT_KEY)
            return None

        return entries

    def store(self, entries: Sequence[InventoryEntry]) -> None:
        """Persist the inventory with a fresh timestamp.

        Failures are logged and ignored; in-memory state stays authoritative.

        Args:
            entries: Full inventory tree to persist.
        """
        try:
            blob = serialize_entries(entries)
            self._store.update({TREE_KEY: blob, STORED_AT_KEY: self._clock()})
        except (StoreError, TypeError, ValueError) as e:
            logger.warning("Failed to persist inventory cache: %s", e)

    def invalidate(self) -> None:
        """Delete the persisted record and its timestamp."""
        self._discard(TREE_KEY, STORED_AT_KEY)

    def record_age(self) -> float | None:
        """Age of the current record in seconds, or None if there is none."""
        if not self._store.contains(TREE_KEY):
            return None
        stored_at = _parse_timestamp(self._store.get(STORED_AT_KEY))
        if stored_at is None:
            return None
        return self._clock() - stored_at

    def _load_current(self) -> tuple[list[InventoryEntry] | None, float | None]:
        """Read the current-format record.

        Returns:
            (entries, stored_at); entries is None when absent or corrupt.
        """
        blob = self._store.get(TREE_KEY)
        if blob is None:
            return None, None

        try:
            entries = deserialize_entries(blob)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding corrupt inventory cache: %s", e)
            self._discard(TREE_KEY, STORED_AT_KEY)
            return None, None

        return entries, _parse_timestamp(self._store.get(STORED_AT_KEY))

    def _load_legacy(self) -> tuple[list[InventoryEntry], float | None] | None:
        """Upconvert a record in the old flat-list format, best effort.

        A converted record is rewritten under the current keys with its
        original timestamp and the legacy keys are removed.

        Returns:
            (entries, stored_at), or None if no usable legacy record exists.
        """
        raw = self._store.get(LEGACY_TREE_KEY)
        if raw is None:
            return None

        try:
            items = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            logger.warning("Discarding unreadable legacy inventory cache: %s", e)
            self._discard(LEGACY_TREE_KEY, LEGACY_STORED_AT_KEY)
            return None

        if not isinstance(items, list):
            logger.warning("Discarding legacy inventory cache with unexpected shape")
            self._discard(LEGACY_TREE_KEY, LEGACY_STORED_AT_KEY)
            return None

        apps = [app for app in (_legacy_item(item) for item in items) if app is not None]
        entries = sort_entries(apps)
        stored_at = _parse_timestamp(self._store.get(LEGACY_STORED_AT_KEY))
        logger.info("Upconverted %d applications from legacy inventory cache", len(entries))

        values: dict[str, Any] = {TREE_KEY: serialize_entries(entries)}
        if stored_at is not None:
            values[STORED_AT_KEY] = stored_at
        try:
            self._store.update(values)
            self._store.delete(LEGACY_TREE_KEY, LEGACY_STORED_AT_KEY)
        except StoreError as e:
            logger.warning("Failed to rewrite legacy inventory cache: %s", e)

        return entries, stored_at

    def _discard(self, *keys: str) -> None:
        try:
            self._store.delete(*keys)
        except StoreError as e:
            logger.warning("Failed to delete cache record: %s", e)

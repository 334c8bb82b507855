"""Unit tests for the persisted inventory cache."""

import json
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from appdeck.core.store import KeyValueStore, StoreError
from appdeck.inventory.cache import (
    LEGACY_STORED_AT_KEY,
    LEGACY_TREE_KEY,
    STORED_AT_KEY,
    TREE_KEY,
    InventoryCache,
    deserialize_entries,
    serialize_entries,
)
from appdeck.models.inventory import ApplicationItem, Category, FolderItem

T0 = 1_700_000_000.0
APP_A = {"kind": "app", "name": "A"}


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "store.json")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(store: KeyValueStore, clock: FakeClock) -> InventoryCache:
    return InventoryCache(store, clock=clock)


@pytest.fixture
def tree() -> list:
    return [
        ApplicationItem(name="Finder", category=Category.SYSTEM, identifier="com.apple.finder"),
        FolderItem(
            name="Utils",
            category=Category.UTILITIES,
            apps=(ApplicationItem(name="Calc", path="/Applications/Utils/Calc.app"),),
            folder_path="/Applications/Utils",
        ),
    ]


class TestSerialization:
    """Tests for serialize_entries() and deserialize_entries()."""

    def test_tree_survives_storage(self, tree: list) -> None:
        """Structure, categories, paths and identities are preserved."""
        assert deserialize_entries(serialize_entries(tree)) == tree

    def test_rejects_non_string(self) -> None:
        """Blobs must be JSON text."""
        with pytest.raises(TypeError):
            deserialize_entries(42)

    def test_rejects_non_list(self) -> None:
        """The top level must be a list."""
        with pytest.raises(TypeError):
            deserialize_entries('{"kind": "app"}')


class TestInventoryCache:
    """Tests for InventoryCache load/store/invalidate."""

    def test_empty_store_is_a_miss(self, cache: InventoryCache) -> None:
        """Nothing stored means no record."""
        assert cache.load() is None

    def test_store_then_load(self, cache: InventoryCache, tree: list) -> None:
        """A fresh record is served as stored."""
        cache.store(tree)
        assert cache.load() == tree

    def test_just_before_expiry(
        self, cache: InventoryCache, clock: FakeClock, tree: list
    ) -> None:
        """A record younger than an hour is fresh."""
        cache.store(tree)
        clock.now = T0 + 3599
        assert cache.load() == tree

    def test_just_after_expiry(
        self, cache: InventoryCache, clock: FakeClock, store: KeyValueStore, tree: list
    ) -> None:
        """An expired record is a miss and is deleted."""
        cache.store(tree)
        clock.now = T0 + 3601
        assert cache.load() is None
        assert not store.contains(TREE_KEY)
        assert not store.contains(STORED_AT_KEY)

    def test_exact_expiry_is_stale(
        self, cache: InventoryCache, clock: FakeClock, tree: list
    ) -> None:
        """Age equal to the interval counts as expired."""
        cache.store(tree)
        clock.now = T0 + 3600
        assert cache.load() is None

    def test_store_replaces_record_and_timestamp(
        self, cache: InventoryCache, clock: FakeClock, store: KeyValueStore, tree: list
    ) -> None:
        """Each store rewrites both keys."""
        cache.store(tree)
        clock.now = T0 + 100
        cache.store(tree[:1])
        assert store.get(STORED_AT_KEY) == T0 + 100
        assert cache.load() == tree[:1]

    def test_empty_tree_is_cached(self, cache: InventoryCache) -> None:
        """An empty inventory is a valid record."""
        cache.store([])
        assert cache.load() == []

    def test_missing_timestamp_is_expired(
        self, cache: InventoryCache, store: KeyValueStore, tree: list
    ) -> None:
        """A record without a timestamp is never served."""
        store.set(TREE_KEY, serialize_entries(tree))
        assert cache.load() is None
        assert not store.contains(TREE_KEY)

    def test_iso_timestamp(self, cache: InventoryCache, store: KeyValueStore, tree: list) -> None:
        """ISO 8601 timestamps are accepted."""
        stored_at = datetime.fromtimestamp(T0 - 60, tz=UTC).isoformat()
        store.update({TREE_KEY: serialize_entries(tree), STORED_AT_KEY: stored_at})
        assert cache.load() == tree

    def test_corrupt_record_is_discarded(
        self, cache: InventoryCache, store: KeyValueStore
    ) -> None:
        """Unreadable records are a miss and are removed."""
        store.update({TREE_KEY: "[{not json", STORED_AT_KEY: T0})
        assert cache.load() is None
        assert not store.contains(TREE_KEY)

    def test_wrong_shape_is_discarded(
        self, cache: InventoryCache, store: KeyValueStore
    ) -> None:
        """Records of the wrong shape are a miss."""
        store.update({TREE_KEY: json.dumps([{"kind": "app"}]), STORED_AT_KEY: T0})
        assert cache.load() is None

    @pytest.mark.parametrize(
        "payload",
        [
            [1],
            ["x"],
            [None],
            [{"kind": "folder", "name": "U", "folder_path": "/U", "apps": [1]}],
            [{"kind": "folder", "name": "U", "folder_path": "/U", "apps": "Calc"}],
        ],
    )
    def test_non_dict_entries_are_discarded(
        self, cache: InventoryCache, store: KeyValueStore, payload: list
    ) -> None:
        """Entries that are not objects make the whole record a miss."""
        store.update({TREE_KEY: json.dumps(payload), STORED_AT_KEY: T0})
        assert cache.load() is None
        assert not store.contains(TREE_KEY)
        assert not store.contains(STORED_AT_KEY)

    @pytest.mark.parametrize(
        "item",
        [
            {"kind": "app", "name": 5},
            {"kind": "app", "name": "Calc", "identifier": 7},
            {"kind": "app", "name": "Calc", "path": ["/x"]},
            {"kind": "app", "name": "Calc", "id": 3},
            {"kind": "folder", "name": 1, "folder_path": "/U", "apps": [APP_A]},
            {"kind": "folder", "name": "U", "folder_path": 2, "apps": [APP_A]},
        ],
    )
    def test_mistyped_fields_are_discarded(
        self, cache: InventoryCache, store: KeyValueStore, item: dict
    ) -> None:
        """Fields of the wrong type are a miss, not a hit that fails later."""
        store.update({TREE_KEY: json.dumps([item]), STORED_AT_KEY: T0})
        assert cache.load() is None
        assert not store.contains(TREE_KEY)

    def test_invalidate(self, cache: InventoryCache, store: KeyValueStore, tree: list) -> None:
        """Invalidation deletes the record and timestamp."""
        cache.store(tree)
        cache.invalidate()
        assert cache.load() is None
        assert not store.contains(STORED_AT_KEY)

    def test_store_failure_is_swallowed(self, cache: InventoryCache, tree: list) -> None:
        """Persistence errors never propagate."""
        with patch.object(KeyValueStore, "update", side_effect=StoreError("disk full")):
            cache.store(tree)
        assert cache.load() is None

    def test_record_age(self, cache: InventoryCache, clock: FakeClock, tree: list) -> None:
        """Age is measured from the stored timestamp."""
        assert cache.record_age() is None
        cache.store(tree)
        clock.now = T0 + 42
        assert cache.record_age() == 42

    def test_custom_interval(self, store: KeyValueStore, clock: FakeClock, tree: list) -> None:
        """The expiration interval is configurable."""
        cache = InventoryCache(store, clock=clock, expiration_interval=10)
        cache.store(tree)
        clock.now = T0 + 11
        assert cache.load() is None


class TestLegacyRecord:
    """Tests for upconversion of the flat-list format."""

    def _legacy(self) -> str:
        return json.dumps(
            [
                {
                    "id": "7D1C",
                    "name": "safari",
                    "bundleIdentifier": "com.apple.Safari",
                    "path": "/Applications/Safari.app",
                    "category": "System",
                },
                {"name": "Calc", "bundleIdentifier": None, "category": "Nope"},
                {"bundleIdentifier": "no.name"},
            ]
        )

    def test_upconverts_and_rewrites(
        self, cache: InventoryCache, store: KeyValueStore, clock: FakeClock
    ) -> None:
        """Legacy items become a sorted flat tree under the current keys."""
        store.update({LEGACY_TREE_KEY: self._legacy(), LEGACY_STORED_AT_KEY: T0 - 10})

        entries = cache.load()

        assert entries is not None
        assert [entry.name for entry in entries] == ["Calc", "safari"]
        calc, safari = entries
        assert calc.category is Category.UTILITIES
        assert calc.identifier == ""
        assert safari.category is Category.SYSTEM
        assert safari.path == "/Applications/Safari.app"
        assert not store.contains(LEGACY_TREE_KEY)
        assert not store.contains(LEGACY_STORED_AT_KEY)
        assert store.get(STORED_AT_KEY) == T0 - 10
        assert [entry.name for entry in cache.load()] == ["Calc", "safari"]

    def test_expired_legacy_record(self, cache: InventoryCache, store: KeyValueStore) -> None:
        """Legacy timestamps are honored."""
        store.update({LEGACY_TREE_KEY: self._legacy(), LEGACY_STORED_AT_KEY: T0 - 7200})
        assert cache.load() is None
        assert not store.contains(TREE_KEY)
        assert not store.contains(LEGACY_TREE_KEY)

    def test_unreadable_legacy_record(self, cache: InventoryCache, store: KeyValueStore) -> None:
        """Broken legacy data is dropped."""
        store.update({LEGACY_TREE_KEY: "{{{", LEGACY_STORED_AT_KEY: T0})
        assert cache.load() is None
        assert not store.contains(LEGACY_TREE_KEY)

    def test_current_record_takes_precedence(
        self, cache: InventoryCache, store: KeyValueStore, tree: list
    ) -> None:
        """Legacy data is only consulted when there is no current record."""
        cache.store(tree)
        store.update({LEGACY_TREE_KEY: self._legacy(), LEGACY_STORED_AT_KEY: T0})
        assert cache.load() == tree

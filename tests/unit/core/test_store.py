"""Unit tests for the persisted key-value store."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from appdeck.core.store import KeyValueStore, StoreError


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "cache" / "store.json")


class TestKeyValueStore:
    """Tests for KeyValueStore."""

    def test_default_path(self, isolated_xdg: Path) -> None:
        """Without a path the store lives in the cache dir."""
        assert KeyValueStore().path == isolated_xdg / "cache" / "appdeck" / "store.json"

    def test_missing_file_reads_empty(self, store: KeyValueStore) -> None:
        """A store that was never written has no keys."""
        assert store.get("a") is None
        assert store.get("a", 1) == 1
        assert not store.contains("a")

    def test_set_and_get(self, store: KeyValueStore) -> None:
        """Written values can be read back."""
        store.set("a", {"nested": [1, 2]})
        assert store.get("a") == {"nested": [1, 2]}
        assert store.contains("a")

    def test_values_persist_across_instances(self, store: KeyValueStore) -> None:
        """The document is shared by every instance on the same path."""
        store.update({"a": 1, "b": "two"})
        other = KeyValueStore(store.path)
        assert other.get("a") == 1
        assert other.get("b") == "two"

    def test_delete(self, store: KeyValueStore) -> None:
        """Deleted keys disappear, others stay."""
        store.update({"a": 1, "b": 2})
        store.delete("a", "missing")
        assert not store.contains("a")
        assert store.get("b") == 2

    def test_delete_absent_keys_does_not_write(self, store: KeyValueStore) -> None:
        """Deleting nothing leaves the file untouched."""
        store.delete("a")
        assert not store.path.exists()

    def test_malformed_document_is_empty(self, store: KeyValueStore) -> None:
        """Malformed JSON is treated as empty and replaced on write."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        assert store.get("a") is None
        store.set("a", 1)
        assert json.loads(store.path.read_text()) == {"a": 1}

    def test_non_object_document_is_empty(self, store: KeyValueStore) -> None:
        """A document that is not an object is ignored."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[1, 2]")
        assert not store.contains("0")

    def test_unserializable_value(self, store: KeyValueStore) -> None:
        """Values that are not JSON raise StoreError and write nothing."""
        with pytest.raises(StoreError, match="Cannot serialize"):
            store.set("a", object())
        assert not store.path.exists()

    def test_write_failure_keeps_previous_document(self, store: KeyValueStore) -> None:
        """A failed replace leaves the old document and no temp files."""
        store.set("a", 1)
        with (
            patch("appdeck.core.store.os.replace", side_effect=OSError("disk full")),
            pytest.raises(StoreError, match="Failed to write"),
        ):
            store.set("a", 2)

        assert store.get("a") == 1
        assert os.listdir(store.path.parent) == ["store.json"]

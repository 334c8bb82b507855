"""Persisted key-value store.

A small JSON document mapping string keys to JSON values. Every write
rewrites the whole document atomically (temporary file in the same
directory followed by ``os.replace``), so a crash mid-write leaves the
previous document intact.
"""

import json
import logging
import os
import threading
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from appdeck.core.paths import get_store_path

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the store cannot be written."""


class KeyValueStore:
    """Thread-safe JSON key-value store backed by a single file.

    Storage location: ~/.cache/appdeck/store.json

    An unreadable or malformed document is treated as empty and is
    replaced on the next write.

    Args:
        path: Optional override for the store file.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else get_store_path()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Path to the store document."""
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value.

        Args:
            key: Key to look up.
            default: Value returned when the key is absent.

        Returns:
            Stored value or ``default``.
        """
        with self._lock:
            return self._read().get(key, default)

    def contains(self, key: str) -> bool:
        """Check whether a key is present."""
        with self._lock:
            return key in self._read()

    def set(self, key: str, value: Any) -> None:
        """Write a single value.

        Args:
            key: Key to write.
            value: JSON-serializable value.

        Raises:
            StoreError: If the value cannot be serialized or written.
        """
        self.update({key: value})

    def update(self, values: dict[str, Any]) -> None:
        """Write several values in one atomic document replacement.

        Args:
            values: Mapping of keys to JSON-serializable values.

        Raises:
            StoreError: If the values cannot be serialized or written.
        """
        with self._lock:
            data = self._read()
            data.update(values)
            self._write(data)

    def delete(self, *keys: str) -> None:
        """Remove keys; absent keys are ignored.

        Raises:
            StoreError: If the document cannot be written.
        """
        with self._lock:
            data = self._read()
            if not any(key in data for key in keys):
                return
            for key in keys:
                data.pop(key, None)
            self._write(data)

    def _read(self) -> dict[str, Any]:
        """Load the whole document; caller holds the lock."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Cannot read store %s: %s", self._path, e)
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Discarding malformed store %s: %s", self._path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Discarding store %s: top level is not an object", self._path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        """Replace the document atomically; caller holds the lock."""
        try:
            payload = json.dumps(data, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            msg = f"Cannot serialize store data: {e}"
            raise StoreError(msg) from e

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(payload)
            # os.replace() is atomic on POSIX
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            msg = f"Failed to write store {self._path}: {e}"
            raise StoreError(msg) from e

"""Storage tiers for the image cache.

The memory tier is an LRU map bounded by both entry count and total
byte cost. The disk tier stores PNG files named after a hash of the key.
Neither tier is synchronized; ImageCache serializes access to them.
"""

import hashlib
import logging
import os
from collections import OrderedDict
from pathlib import Path
from tempfile import NamedTemporaryFile

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Bytes per pixel assumed when costing a decoded image
_BYTES_PER_PIXEL = 4


def image_cost(image: Image.Image) -> int:
    """Approximate the memory cost of a decoded image in bytes."""
    width, height = image.size
    return width * height * _BYTES_PER_PIXEL


class MemoryTier:
    """Least-recently-used image map with entry and byte bounds.

    Args:
        max_entries: Maximum number of images retained.
        max_bytes: Maximum total cost of retained images.
    """

    def __init__(self, max_entries: int, max_bytes: int) -> None:
        if max_entries < 1:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        if max_bytes < 1:
            msg = f"max_bytes must be positive, got {max_bytes}"
            raise ValueError(msg)
        self.max_entries = max_entries
        self.max_bytes = max_bytes
        self._items: OrderedDict[str, tuple[Image.Image, int]] = OrderedDict()
        self._total_bytes = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def total_bytes(self) -> int:
        """Total cost of retained images."""
        return self._total_bytes

    def get(self, key: str) -> Image.Image | None:
        """Return an image and mark it most recently used."""
        item = self._items.get(key)
        if item is None:
            return None
        self._items.move_to_end(key)
        return item[0]

    def put(self, key: str, image: Image.Image) -> None:
        """Insert an image, evicting least recently used ones as needed.

        An image costing more than ``max_bytes`` on its own is not retained.
        """
        self.discard(key)
        cost = image_cost(image)
        if cost > self.max_bytes:
            logger.debug("Image %s exceeds memory budget (%d bytes)", key, cost)
            return

        self._items[key] = (image, cost)
        self._total_bytes += cost
        while len(self._items) > self.max_entries or self._total_bytes > self.max_bytes:
            evicted_key, (_, evicted_cost) = self._items.popitem(last=False)
            self._total_bytes -= evicted_cost
            logger.debug("Evicted %s from memory tier", evicted_key)

    def discard(self, key: str) -> None:
        """Remove a key if present."""
        item = self._items.pop(key, None)
        if item is not None:
            self._total_bytes -= item[1]

    def clear(self) -> None:
        """Drop every image."""
        self._items.clear()
        self._total_bytes = 0


class DiskTier:
    """PNG files in one directory, named by a SHA-256 of the key.

    Args:
        directory: Directory holding the cached files.
    """

    SUFFIX = ".png"

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, key: str) -> Path:
        """Return the file that stores ``key``."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.SUFFIX}"

    def get(self, key: str) -> Image.Image | None:
        """Decode a cached image; unreadable files are deleted.

        Returns:
            Fully loaded image, or None if absent or unreadable.
        """
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            with Image.open(path) as image:
                image.load()
                return image.copy()
        except (OSError, UnidentifiedImageError) as e:
            logger.warning("Discarding unreadable cached image %s: %s", path, e)
            path.unlink(missing_ok=True)
            return None

    def put(self, key: str, image: Image.Image) -> None:
        """Write an image as PNG atomically.

        Raises:
            OSError: If the file cannot be written.
        """
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(dir=self.directory, delete=False, suffix=".tmp") as f:
                tmp_path = Path(f.name)
                image.save(f, format="PNG")
            os.replace(str(tmp_path), str(path))
        except (OSError, ValueError):
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise

    def clear(self) -> None:
        """Delete every cached file in the directory."""
        if not self.directory.is_dir():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            try:
                path.unlink()
            except OSError as e:
                logger.warning("Cannot delete cached image %s: %s", path, e)


class FixedFileDiskTier(DiskTier):
    """Disk tier holding a single image under a fixed file name.

    Every key maps to the same file, so callers must clear the tier when
    the source behind the key changes.

    Args:
        directory: Directory holding the file.
        filename: Fixed file name.
    """

    def __init__(self, directory: Path, filename: str) -> None:
        super().__init__(directory)
        self.filename = filename

    def path_for(self, key: str) -> Path:
        return self.directory / self.filename

    def clear(self) -> None:
        (self.directory / self.filename).unlink(missing_ok=True)

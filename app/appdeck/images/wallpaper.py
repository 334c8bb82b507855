"""Wallpaper image cache.

The wallpaper is cached under a fixed file name and keyed by a
fingerprint of its source file. The fingerprint seen last is persisted;
a change clears the cache before the new wallpaper is decoded. The very
first fingerprint is recorded without clearing anything.
"""

import logging
import threading
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from appdeck.core.store import KeyValueStore, StoreError
from appdeck.images.cache import ImageCache
from appdeck.images.tiers import FixedFileDiskTier, MemoryTier

logger = logging.getLogger(__name__)

WALLPAPER_FILENAME = "wallpaper.png"
FINGERPRINT_KEY = "wallpaper.fingerprint.v1"
DEFAULT_WALLPAPER_MEMORY_BYTES = 64 * 1024 * 1024


def wallpaper_fingerprint(source: Path) -> str:
    """Derive a cheap change marker for a wallpaper source.

    Args:
        source: Wallpaper image file.

    Returns:
        "<mtime_ns>-<size>", or the file name if the file cannot be stat'ed.
    """
    try:
        stat = source.stat()
    except OSError:
        return source.name
    return f"{stat.st_mtime_ns}-{stat.st_size}"


class WallpaperCache(ImageCache):
    """Fingerprint-invalidated cache for the current wallpaper.

    Args:
        store: Key-value store persisting the last seen fingerprint.
        directory: Disk tier directory, or None for memory only.
        max_bytes: Memory tier byte bound.
    """

    def __init__(
        self,
        store: KeyValueStore,
        directory: Path | None = None,
        *,
        max_bytes: int = DEFAULT_WALLPAPER_MEMORY_BYTES,
    ) -> None:
        disk = FixedFileDiskTier(directory, WALLPAPER_FILENAME) if directory is not None else None
        super().__init__(MemoryTier(max_entries=2, max_bytes=max_bytes), disk)
        self._store = store
        self._fingerprint_lock = threading.Lock()
        self._fingerprint: str | None = None
        self._fingerprint_loaded = False

    def should_update_cache(self, source: Path) -> bool:
        """Check the source fingerprint against the last one seen.

        The first observation is recorded and reports no change.

        Args:
            source: Wallpaper image file.

        Returns:
            True exactly once per fingerprint change.
        """
        current = wallpaper_fingerprint(source)
        with self._fingerprint_lock:
            if not self._fingerprint_loaded:
                stored = self._store.get(FINGERPRINT_KEY)
                self._fingerprint = stored if isinstance(stored, str) else None
                self._fingerprint_loaded = True

            previous = self._fingerprint
            if previous == current:
                return False

            self._fingerprint = current
            try:
                self._store.set(FINGERPRINT_KEY, current)
            except StoreError as e:
                logger.warning("Failed to persist wallpaper fingerprint: %s", e)
            return previous is not None

    def load(self, source: Path) -> Image.Image | None:
        """Return the wallpaper, decoding the source on a miss.

        Args:
            source: Wallpaper image file.

        Returns:
            RGB image, or None if the source cannot be decoded.
        """
        if self.should_update_cache(source):
            logger.info("Wallpaper changed, clearing cache")
            self.clear()

        key = wallpaper_fingerprint(source)
        cached = self.get(key)
        if cached is not None:
            return cached

        try:
            with Image.open(source) as image:
                image.load()
                wallpaper = image.convert("RGB")
        except (OSError, UnidentifiedImageError) as e:
            logger.warning("Cannot decode wallpaper %s: %s", source, e)
            return None

        self.put(key, wallpaper)
        return wallpaper

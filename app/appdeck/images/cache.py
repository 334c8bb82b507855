"""Two-tier image cache with hit/miss accounting.

Lookups consult the memory tier first and the disk tier second; a disk
hit is promoted into memory. All access goes through one lock, so a
single cache can be shared by many worker threads loading icons for the
grid at the same time.
"""

import logging
import threading
from dataclasses import dataclass

from PIL import Image

from appdeck.images.tiers import DiskTier, MemoryTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Cumulative lookup statistics of an image cache.

    Attributes:
        hits: Lookups answered by either tier.
        misses: Lookups answered by neither tier.
    """

    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups that hit (0.0 when there were none)."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class ImageCache:
    """Memory + disk image cache keyed by a stable string identity.

    Statistics accumulate for the lifetime of the instance and are not
    reset by clear().

    Args:
        memory: Bounded in-memory tier.
        disk: Optional persistent tier.
    """

    def __init__(self, memory: MemoryTier, disk: DiskTier | None = None) -> None:
        self._memory = memory
        self._disk = disk
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Image.Image | None:
        """Look up an image.

        Args:
            key: Cache key.

        Returns:
            Cached image, or None on a miss.
        """
        with self._lock:
            image = self._memory.get(key)
            if image is None and self._disk is not None:
                image = self._disk.get(key)
                if image is not None:
                    self._memory.put(key, image)
            if image is None:
                self._misses += 1
            else:
                self._hits += 1
            return image

    def put(self, key: str, image: Image.Image) -> None:
        """Store an image in both tiers.

        Disk write failures are logged; the memory tier keeps the image.

        Args:
            key: Cache key.
            image: Decoded image.
        """
        with self._lock:
            self._memory.put(key, image)
        if self._disk is None:
            return
        # Disk write runs outside the lock
        try:
            self._disk.put(key, image)
        except (OSError, ValueError) as e:
            logger.warning("Failed to write %s to disk cache: %s", key, e)

    def clear(self) -> None:
        """Drop every cached image from both tiers."""
        with self._lock:
            self._memory.clear()
            if self._disk is None:
                return
            try:
                self._disk.clear()
            except OSError as e:
                logger.warning("Failed to clear disk cache: %s", e)

    def stats(self) -> CacheStats:
        """Return cumulative hit/miss counts."""
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses)

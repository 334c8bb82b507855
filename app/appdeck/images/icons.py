"""Application icon cache.

Icons are keyed by bundle path, decoded from the bundle's ``.icns``
file with Pillow and scaled down to a fixed square size.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Executor
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from appdeck.bundles.reader import BundleReader
from appdeck.images.cache import ImageCache
from appdeck.images.tiers import DiskTier, MemoryTier

logger = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 128
DEFAULT_ICON_MEMORY_ENTRIES = 256
DEFAULT_ICON_MEMORY_BYTES = 64 * 1024 * 1024


class IconCache(ImageCache):
    """Tiered cache of decoded application icons.

    Args:
        reader: Bundle reader used to locate icon files.
        directory: Disk tier directory, or None for memory only.
        icon_size: Edge length icons are scaled down to.
        max_entries: Memory tier entry bound.
        max_bytes: Memory tier byte bound.
    """

    def __init__(
        self,
        reader: BundleReader,
        directory: Path | None = None,
        *,
        icon_size: int = DEFAULT_ICON_SIZE,
        max_entries: int = DEFAULT_ICON_MEMORY_ENTRIES,
        max_bytes: int = DEFAULT_ICON_MEMORY_BYTES,
    ) -> None:
        disk = DiskTier(directory) if directory is not None else None
        super().__init__(MemoryTier(max_entries, max_bytes), disk)
        self._reader = reader
        self._icon_size = icon_size

    def icon_for(self, path: Path | str) -> Image.Image | None:
        """Return the icon of a bundle, decoding it on a miss.

        Args:
            path: Bundle path (the cache key).

        Returns:
            Icon image, or None if the bundle has no decodable icon.
        """
        key = str(path)
        cached = self.get(key)
        if cached is not None:
            return cached

        icon = self._decode(Path(path))
        if icon is None:
            return None
        self.put(key, icon)
        return icon

    def warm(self, paths: Iterable[Path | str], executor: Executor) -> int:
        """Load icons for many bundles concurrently.

        Args:
            paths: Bundle paths.
            executor: Executor running the loads.

        Returns:
            Number of bundles that produced an icon.
        """
        return sum(1 for icon in executor.map(self.icon_for, paths) if icon is not None)

    def _decode(self, bundle: Path) -> Image.Image | None:
        icon_file = self._reader.icon_path(bundle)
        if icon_file is None:
            logger.debug("No icon declared for %s", bundle)
            return None
        try:
            with Image.open(icon_file) as image:
                image.load()
                icon = image.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            logger.debug("Cannot decode icon %s: %s", icon_file, e)
            return None
        icon.thumbnail((self._icon_size, self._icon_size))
        return icon

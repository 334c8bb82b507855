"""Tiered image caches for application icons and the wallpaper."""

from appdeck.images.cache import CacheStats, ImageCache
from appdeck.images.icons import IconCache
from appdeck.images.tiers import DiskTier, FixedFileDiskTier, MemoryTier, image_cost
from appdeck.images.wallpaper import WallpaperCache, wallpaper_fingerprint

__all__ = [
    "CacheStats",
    "DiskTier",
    "FixedFileDiskTier",
    "IconCache",
    "ImageCache",
    "MemoryTier",
    "WallpaperCache",
    "image_cost",
    "wallpaper_fingerprint",
]

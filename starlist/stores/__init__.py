"""Persistence helpers for starlist."""

from .catalog_cache import CacheIncompatibleError, CacheSlot, CatalogCache, FileCacheSlot

__all__ = ["CacheIncompatibleError", "CacheSlot", "CatalogCache", "FileCacheSlot"]

"""Caching module for ACache.

This module provides path-keyed caches on top of storage backends and
a multi-level cache stacking several caches.
"""

from acache.cache.base import MISSING, Cache, Namespace
from acache.cache.keys import DEFAULT_NAMESPACE_DELIMITER, CacheKeyBuilder
from acache.cache.multilevel import MultiLevelCache
from acache.cache.path_key import PathKeyCache

__all__ = [
    "MISSING",
    "Cache",
    "Namespace",
    "DEFAULT_NAMESPACE_DELIMITER",
    "CacheKeyBuilder",
    "MultiLevelCache",
    "PathKeyCache",
]

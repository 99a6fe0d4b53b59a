"""Storage backends for ACache.

``RedisStorage`` and ``S3Storage`` live in ``acache.storage.redis`` and
``acache.storage.s3`` so their client libraries are only imported when used.
"""

from acache.storage.base import (
    NEVER_EXPIRES,
    STATS_MEMORY_USAGE,
    STATS_SIZE,
    STATS_UPTIME,
    CacheEntry,
    StorageBackend,
)
from acache.storage.filesystem import FilesystemStorage
from acache.storage.memory import InMemoryStorage
from acache.storage.shared import SharedMemoryStorage

__all__ = [
    "NEVER_EXPIRES",
    "STATS_MEMORY_USAGE",
    "STATS_SIZE",
    "STATS_UPTIME",
    "CacheEntry",
    "StorageBackend",
    "FilesystemStorage",
    "InMemoryStorage",
    "SharedMemoryStorage",
]

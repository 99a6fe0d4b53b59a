"""In-memory storage backend for ACache."""

import asyncio

from acache.storage.base import STATS_SIZE, CacheEntry, StorageBackend


class InMemoryStorage(StorageBackend):
    """Simple dict-backed storage.

    Entries are kept until they are deleted or flushed; expiry is
    enforced by the cache reading them. Suitable for single-process
    deployments or testing.
    """

    def __init__(self):
        """Initialize the in-memory storage."""
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> CacheEntry | None:
        async with self._lock:
            return self._entries.get(key)

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return key in self._entries

    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        async with self._lock:
            self._entries[key] = entry
            return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key in self._entries:
                del self._entries[key]
                return True
            return False

    async def flush(self, prefix: str | None = None) -> bool:
        """Delete all entries, or all entries with a key prefix."""
        async with self._lock:
            if prefix is None:
                self._entries.clear()
                return True
            keys_to_delete = [key for key in self._entries if key.startswith(prefix)]
            for key in keys_to_delete:
                del self._entries[key]
            return True

    @property
    def size(self) -> int:
        """Get the current number of stored entries."""
        return len(self._entries)

    async def stats(self) -> dict:
        return {STATS_SIZE: len(self._entries)}

"""Process-wide shared storage backend for ACache."""

import threading

from acache.storage.base import STATS_SIZE, CacheEntry, StorageBackend

_segments: dict[str, dict[str, CacheEntry]] = {}
_lock = threading.Lock()
_enabled = True


class SharedMemoryStorage(StorageBackend):
    """Storage shared by everything in the current process.

    All instances naming the same segment see the same entries, no
    matter which event loop or thread uses them. The shared store can
    be switched off with ``disable()``; while it is unavailable, reads
    report nothing stored and writes fail, and ``available()`` returns
    False so callers can tell "unavailable" from "empty".
    """

    def __init__(self, segment: str = "default"):
        """Initialize the shared storage.

        Args:
            segment: Name of the shared segment to use
        """
        self.segment = segment

    @staticmethod
    def enable() -> None:
        """Make the shared store available."""
        global _enabled
        _enabled = True

    @staticmethod
    def disable() -> None:
        """Make the shared store unavailable (its contents are kept)."""
        global _enabled
        _enabled = False

    @staticmethod
    def reset() -> None:
        """Drop all segments."""
        with _lock:
            _segments.clear()

    def _entries(self) -> dict[str, CacheEntry]:
        return _segments.setdefault(self.segment, {})

    async def get(self, key: str) -> CacheEntry | None:
        if not _enabled:
            return None
        with _lock:
            return self._entries().get(key)

    async def exists(self, key: str) -> bool:
        if not _enabled:
            return False
        with _lock:
            return key in self._entries()

    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        if not _enabled:
            return False
        with _lock:
            self._entries()[key] = entry
            return True

    async def delete(self, key: str) -> bool:
        if not _enabled:
            return False
        with _lock:
            return self._entries().pop(key, None) is not None

    async def flush(self, prefix: str | None = None) -> bool:
        if not _enabled:
            return False
        with _lock:
            entries = self._entries()
            if prefix is None:
                entries.clear()
            else:
                for key in [key for key in entries if key.startswith(prefix)]:
                    del entries[key]
            return True

    async def stats(self) -> dict:
        with _lock:
            return {STATS_SIZE: len(self._entries()), "segment": self.segment}

    async def available(self) -> bool:
        return _enabled

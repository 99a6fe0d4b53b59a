"""Path-keyed cache built on top of a storage backend."""

import logging
import time
from typing import Any, Callable

from acache.cache.base import MISSING, Cache, Namespace
from acache.cache.keys import DEFAULT_NAMESPACE_DELIMITER, CacheKeyBuilder
from acache.storage.base import NEVER_EXPIRES, CacheEntry, StorageBackend

logger = logging.getLogger(__name__)


class PathKeyCache(Cache):
    """Cache that maps ``(id, namespace)`` onto single backend keys.

    This cache owns namespace composition and time-to-live handling;
    the backend only stores and returns raw entries. Entries are checked
    against the cache clock on every read, so an expired entry reads as
    absent even if the backend has not purged it yet.

    Typical usage:
        cache = PathKeyCache(InMemoryStorage(), default_ttl=300)
        await cache.save("yin", "yang", namespace=["users", "42"])
    """

    def __init__(
        self,
        backend: StorageBackend,
        namespace_delimiter: str = DEFAULT_NAMESPACE_DELIMITER,
        default_ttl: int = 0,
        clock: Callable[[], float] = time.time,
        strict_keys: bool = False,
    ):
        """Initialize the cache.

        Args:
            backend: The storage backend holding the entries
            namespace_delimiter: Separator used when composing keys
            default_ttl: Default TTL in seconds (0 for no expiration)
            clock: Time source returning UNIX seconds
            strict_keys: Reject ids/segments containing the delimiter
        """
        if default_ttl < 0:
            raise ValueError("default_ttl must not be negative")
        self.backend = backend
        self.default_ttl = default_ttl
        self._clock = clock
        self._keys = CacheKeyBuilder(namespace_delimiter, strict=strict_keys)

    @property
    def namespace_delimiter(self) -> str:
        """Get the configured namespace delimiter."""
        return self._keys.delimiter

    def get_default_time_to_live(self) -> int:
        """Get the default time-to-live in seconds."""
        return self.default_ttl

    def _now(self) -> int:
        return int(self._clock())

    async def _stored_entry(self, key: str) -> CacheEntry | None:
        if not await self.backend.exists(key):
            return None
        return await self.backend.get(key)

    async def _valid_entry(self, key: str) -> CacheEntry | None:
        entry = await self._stored_entry(key)
        if entry is None or entry.is_expired(self._now()):
            return None
        return entry

    async def fetch(self, id: str, namespace: Namespace = None) -> Any:
        entry = await self._valid_entry(self._keys.compose(id, namespace))
        if entry is None:
            return MISSING
        return entry.value

    async def contains(self, id: str, namespace: Namespace = None) -> bool:
        return await self._valid_entry(self._keys.compose(id, namespace)) is not None

    async def get_time_to_live(
        self, id: str, namespace: Namespace = None
    ) -> int | None:
        entry = await self._stored_entry(self._keys.compose(id, namespace))
        if entry is None:
            return None
        now = self._now()
        if entry.is_expired(now):
            return None
        if entry.expires_at == NEVER_EXPIRES:
            return 0
        # live entries have expires_at > now
        return entry.expires_at - now

    async def save(
        self,
        id: str,
        data: Any,
        lifetime: int | None = None,
        namespace: Namespace = None,
    ) -> bool:
        ttl = self.default_ttl if lifetime is None else int(lifetime)
        if ttl < 0:
            raise ValueError(f"Lifetime must not be negative, got {lifetime}")

        key = self._keys.compose(id, namespace)
        expires_at = self._now() + ttl if ttl else NEVER_EXPIRES
        saved = bool(await self.backend.put(key, CacheEntry(data, expires_at), ttl))
        if not saved:
            logger.warning(f"Backend {type(self.backend).__name__} did not store {key}")
        return saved

    async def delete(self, id: str, namespace: Namespace = None) -> bool:
        return bool(await self.backend.delete(self._keys.compose(id, namespace)))

    async def flush(self, namespace: Namespace = None) -> bool:
        return bool(await self.backend.flush(self._keys.prefix(namespace)))

    async def get_stats(self) -> dict:
        return await self.backend.stats()

    async def available(self) -> bool:
        return await self.backend.available()

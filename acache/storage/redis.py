"""Redis storage backend for ACache."""

import logging
import pickle

from redis.asyncio import Redis
from redis.exceptions import RedisError

from acache.core.exceptions import CacheBackendError
from acache.storage.base import (
    STATS_MEMORY_USAGE,
    STATS_SIZE,
    STATS_UPTIME,
    CacheEntry,
    StorageBackend,
)

logger = logging.getLogger(__name__)


def _escape_glob(pattern: str) -> str:
    """Escape Redis glob metacharacters in a literal key prefix."""
    return "".join("\\" + c if c in "*?[]\\" else c for c in pattern)


class RedisStorage(StorageBackend):
    """Storage backed by a Redis server.

    Entries are pickled and stored with Redis' native expiry, so Redis
    purges them on its own. The client must not decode responses.
    """

    def __init__(self, client: Redis, scan_count: int = 500):
        """Initialize the Redis storage.

        Args:
            client: A ``redis.asyncio.Redis`` client
            scan_count: Batch size hint for SCAN when flushing a prefix
        """
        self.client = client
        self.scan_count = scan_count

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisStorage":
        """Create a storage for a Redis URL like ``redis://localhost:6379/0``."""
        return cls(Redis.from_url(url, decode_responses=False, **kwargs))

    async def get(self, key: str) -> CacheEntry | None:
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            raise CacheBackendError(
                f"Redis GET failed for {key}", operation="get", key=key, original_error=e
            ) from e
        if raw is None:
            return None
        try:
            return pickle.loads(raw)
        except (pickle.UnpicklingError, EOFError, AttributeError, ValueError) as e:
            raise CacheBackendError(
                f"Could not decode Redis entry {key}", operation="get", key=key, original_error=e
            ) from e

    async def exists(self, key: str) -> bool:
        try:
            return await self.client.exists(key) == 1
        except RedisError as e:
            raise CacheBackendError(
                f"Redis EXISTS failed for {key}", operation="exists", key=key, original_error=e
            ) from e

    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        try:
            payload = pickle.dumps(entry, protocol=pickle.HIGHEST_PROTOCOL)
            if ttl:
                return bool(await self.client.set(key, payload, ex=ttl))
            return bool(await self.client.set(key, payload))
        except (RedisError, pickle.PicklingError, TypeError, AttributeError) as e:
            logger.error(f"Failed to store {key} in Redis: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            return await self.client.delete(key) == 1
        except RedisError as e:
            logger.error(f"Failed to delete {key} from Redis: {e}")
            return False

    async def flush(self, prefix: str | None = None) -> bool:
        """Flush the database, or delete all keys starting with prefix."""
        try:
            if prefix is None:
                return bool(await self.client.flushdb())
            pattern = _escape_glob(prefix) + "*"
            async for key in self.client.scan_iter(match=pattern, count=self.scan_count):
                await self.client.delete(key)
            return True
        except RedisError as e:
            logger.error(f"Failed to flush Redis: {e}")
            return False

    async def stats(self) -> dict:
        info = await self.client.info()
        return {
            STATS_SIZE: await self.client.dbsize(),
            STATS_UPTIME: info.get("uptime_in_seconds"),
            STATS_MEMORY_USAGE: info.get("used_memory"),
        }

    async def available(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

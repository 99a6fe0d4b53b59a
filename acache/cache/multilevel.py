"""Multi-level cache that stacks several caches."""

import logging
from typing import Any, Sequence, Tuple

from acache.cache.base import MISSING, Cache, Namespace
from acache.core.exceptions import CacheConfigurationError

logger = logging.getLogger(__name__)


class MultiLevelCache(Cache):
    """Multi-tier cache that checks caches in order.

    Reads go down the stack and stop at the first tier holding the
    entry. Writes, deletes and flushes go to every tier, first to last.

    With ``bubble_on_fetch`` enabled, a value found only further down
    the stack is saved again in all tiers above it, with the remaining
    lifetime of the entry. Lifetimes are whole seconds, so a bubbled
    entry may expire up to a second earlier than the original.

    Typical usage:
        cache = MultiLevelCache([
            PathKeyCache(InMemoryStorage()),                  # L1: fast, local
            PathKeyCache(FilesystemStorage("/var/cache/app")),  # L2: persistent
        ], bubble_on_fetch=True)
    """

    def __init__(self, stack: Sequence[Cache], bubble_on_fetch: bool = False):
        """Initialize the multi-level cache.

        Args:
            stack: Caches in priority order (first = checked first)
            bubble_on_fetch: Restore entries found further down the stack
                in all higher tiers

        Raises:
            CacheConfigurationError: If the stack is empty or contains
                something that is not a Cache
        """
        if not stack:
            raise CacheConfigurationError(
                "Need at least one cache in the stack", setting="stack"
            )
        for cache in stack:
            if not isinstance(cache, Cache):
                raise CacheConfigurationError(
                    f"All stack elements must be Cache instances, got {type(cache).__name__}",
                    setting="stack",
                )
        self._stack: Tuple[Cache, ...] = tuple(stack)
        self._bubble_on_fetch = bool(bubble_on_fetch)

    @property
    def stack(self) -> Tuple[Cache, ...]:
        """Get the caches of this stack, highest priority first."""
        return self._stack

    @property
    def bubble_on_fetch(self) -> bool:
        """Whether fetches restore entries in higher tiers."""
        return self._bubble_on_fetch

    async def fetch(self, id: str, namespace: Namespace = None) -> Any:
        """Fetch a value, checking tiers in order.

        If bubbling is enabled and the value was found below the first
        tier, it is saved in every higher tier, nearest tier first.
        """
        for level, cache in enumerate(self._stack):
            data = await cache.fetch(id, namespace)
            if data is MISSING:
                continue
            if self._bubble_on_fetch and level:
                await self._bubble(id, data, level, namespace)
            return data
        return MISSING

    async def _bubble(
        self, id: str, data: Any, level: int, namespace: Namespace
    ) -> None:
        time_to_live = await self.get_time_to_live(id, namespace)
        if time_to_live is None:
            # expired between fetch and lookup
            logger.debug(f"Not bubbling {id!r}: entry expired at level {level}")
            return

        for target in range(level - 1, -1, -1):
            if not await self._stack[target].save(id, data, time_to_live, namespace):
                logger.warning(
                    f"Bubbling {id!r} from level {level} stopped at level {target}"
                )
                return
        logger.debug(f"Bubbled {id!r} from level {level} with ttl {time_to_live}")

    async def contains(self, id: str, namespace: Namespace = None) -> bool:
        for cache in self._stack:
            if await cache.contains(id, namespace):
                return True
        return False

    async def get_time_to_live(
        self, id: str, namespace: Namespace = None
    ) -> int | None:
        for cache in self._stack:
            time_to_live = await cache.get_time_to_live(id, namespace)
            if time_to_live is not None:
                return time_to_live
        return None

    async def save(
        self,
        id: str,
        data: Any,
        lifetime: int | None = None,
        namespace: Namespace = None,
    ) -> bool:
        """Save a value in all tiers.

        Stops at the first tier that fails; tiers already written are
        not rolled back.
        """
        for level, cache in enumerate(self._stack):
            if not await cache.save(id, data, lifetime, namespace):
                logger.warning(f"Saving {id!r} failed at level {level}")
                return False
        return True

    async def delete(self, id: str, namespace: Namespace = None) -> bool:
        """Delete an entry from all tiers.

        Every tier is visited. The result is True only if every tier
        reports that it deleted the entry.
        """
        deleted = True
        for cache in self._stack:
            if not await cache.delete(id, namespace):
                deleted = False
        return deleted

    async def flush(self, namespace: Namespace = None) -> bool:
        flushed = True
        for level, cache in enumerate(self._stack):
            if not await cache.flush(namespace):
                logger.warning(f"Flushing level {level} failed")
                flushed = False
        return flushed

    async def get_stats(self) -> list:
        """Get statistics from all cache tiers.

        Returns:
            List with the statistics of each tier, in stack order
        """
        return [await cache.get_stats() for cache in self._stack]

    async def available(self) -> bool:
        for cache in self._stack:
            if not await cache.available():
                return False
        return True

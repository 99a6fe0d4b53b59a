"""Storage backend interface for ACache."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

NEVER_EXPIRES = 0

STATS_SIZE = "size"
STATS_UPTIME = "uptime"
STATS_MEMORY_USAGE = "memory_usage"


@dataclass
class CacheEntry:
    """A stored value with its absolute expiry timestamp.

    ``expires_at`` is a UNIX timestamp in seconds, or ``NEVER_EXPIRES``.
    """

    value: Any
    expires_at: int = NEVER_EXPIRES

    def is_expired(self, now: float) -> bool:
        """Check if this entry has expired at the given time."""
        if self.expires_at == NEVER_EXPIRES:
            return False
        return self.expires_at <= now


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Backends store raw entries under fully composed keys. They know
    nothing about namespaces or default lifetimes; that is handled by
    ``PathKeyCache``.

    Failed writes are reported as ``False``. Read faults that are not a
    plain miss raise ``CacheBackendError``.
    """

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Get an entry.

        Args:
            key: The composed cache key

        Returns:
            The stored entry or None if not found
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if an entry is stored under a key.

        Args:
            key: The composed cache key

        Returns:
            True if an entry is stored
        """
        pass

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        """Store an entry.

        Args:
            key: The composed cache key
            entry: The entry to store
            ttl: Effective time-to-live in seconds (0 never expires), for
                backends with native expiry

        Returns:
            True if the entry was stored
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: The composed cache key

        Returns:
            True if the entry existed and was deleted
        """
        pass

    @abstractmethod
    async def flush(self, prefix: str | None = None) -> bool:
        """Delete all entries, or all entries whose key starts with a prefix.

        Args:
            prefix: Optional key prefix

        Returns:
            True on success
        """
        pass

    @abstractmethod
    async def stats(self) -> dict:
        """Get backend statistics.

        Returns:
            Dictionary with at least the number of stored entries
        """
        pass

    async def available(self) -> bool:
        """Check whether the backend is currently usable."""
        return True

"""Base cache interface for ACache."""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Union

Namespace = Union[str, Sequence[str], None]


class _Missing:
    """Marker for "nothing cached", distinct from a cached ``None``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<MISSING>"

    def __reduce__(self):
        return (_Missing, ())


MISSING: Any = _Missing()


class Cache(ABC):
    """Abstract base class for caches.

    Single caches and multi-level caches share this surface, so any
    cache can be used as a tier of a ``MultiLevelCache``.

    Time-to-live values are in seconds. ``0`` means "never expires";
    ``None`` as a lifetime means "use the cache default".
    """

    @abstractmethod
    async def fetch(self, id: str, namespace: Namespace = None) -> Any:
        """Fetch a value from the cache.

        Args:
            id: The cache id
            namespace: Optional namespace (single segment or list of segments)

        Returns:
            The cached value, or ``MISSING`` if there is no valid entry
        """
        pass

    @abstractmethod
    async def contains(self, id: str, namespace: Namespace = None) -> bool:
        """Check if a valid (not expired) entry exists.

        Args:
            id: The cache id
            namespace: Optional namespace

        Returns:
            True if the entry exists and has not expired
        """
        pass

    @abstractmethod
    async def get_time_to_live(
        self, id: str, namespace: Namespace = None
    ) -> int | None:
        """Get the remaining time-to-live of an entry.

        Args:
            id: The cache id
            namespace: Optional namespace

        Returns:
            Remaining seconds, 0 for entries that never expire,
            or None if there is no such entry
        """
        pass

    @abstractmethod
    async def save(
        self,
        id: str,
        data: Any,
        lifetime: int | None = None,
        namespace: Namespace = None,
    ) -> bool:
        """Save a value in the cache.

        Args:
            id: The cache id
            data: The value to cache
            lifetime: Time-to-live in seconds (None uses the default, 0 never expires)
            namespace: Optional namespace

        Returns:
            True if the value was stored
        """
        pass

    @abstractmethod
    async def delete(self, id: str, namespace: Namespace = None) -> bool:
        """Delete an entry.

        Args:
            id: The cache id
            namespace: Optional namespace

        Returns:
            True if the entry existed and was deleted
        """
        pass

    @abstractmethod
    async def flush(self, namespace: Namespace = None) -> bool:
        """Delete all entries, or all entries within a namespace.

        Args:
            namespace: Optional namespace to restrict the flush to

        Returns:
            True on success
        """
        pass

    @abstractmethod
    async def get_stats(self) -> Any:
        """Get cache statistics.

        Returns:
            Implementation-defined statistics, at least an entry count
        """
        pass

    async def available(self) -> bool:
        """Check whether the cache is currently usable.

        The default implementation always returns True.
        """
        return True

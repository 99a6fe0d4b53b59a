"""Cache key composition for ACache."""

from typing import Tuple

from acache.cache.base import Namespace
from acache.core.exceptions import InvalidCacheKeyError

DEFAULT_NAMESPACE_DELIMITER = "=="


class CacheKeyBuilder:
    """Utility class for building composed cache keys.

    A composed key is the namespace segments followed by the id, joined
    with the namespace delimiter:

        >>> CacheKeyBuilder().compose("yin", ["a", "b"])
        'a==b==yin'

    Segments are not escaped. A segment containing the delimiter can
    collide with a different namespace; pass ``strict=True`` to reject
    such segments instead.
    """

    def __init__(
        self,
        delimiter: str = DEFAULT_NAMESPACE_DELIMITER,
        strict: bool = False,
    ):
        """Initialize the key builder.

        Args:
            delimiter: Separator placed between namespace segments and the id
            strict: Reject ids and segments that contain the delimiter
        """
        if not delimiter:
            raise ValueError("Namespace delimiter must not be empty")
        self.delimiter = delimiter
        self.strict = strict

    def segments(self, namespace: Namespace) -> Tuple[str, ...]:
        """Normalize a namespace into a tuple of segments.

        Args:
            namespace: None, a single segment or a sequence of segments

        Returns:
            Tuple of segments (empty for no namespace)
        """
        if namespace is None:
            return ()
        if isinstance(namespace, str):
            parts = (namespace,)
        else:
            parts = tuple(namespace)
        for part in parts:
            self._check(part)
        return parts

    def compose(self, id: str, namespace: Namespace = None) -> str:
        """Compose the full key for an id within a namespace.

        Args:
            id: The cache id
            namespace: Optional namespace

        Returns:
            Composed key like "ns1==ns2==id"
        """
        self._check(id)
        return self.delimiter.join(self.segments(namespace) + (id,))

    def prefix(self, namespace: Namespace) -> str | None:
        """Generate the key prefix shared by all entries of a namespace.

        The prefix ends with the delimiter, so namespace "a" does not
        match keys of namespace "ab".

        Args:
            namespace: The namespace

        Returns:
            Prefix like "ns1==ns2==", or None for the whole cache
        """
        parts = self.segments(namespace)
        if not parts:
            return None
        return self.delimiter.join(parts) + self.delimiter

    def _check(self, segment: object) -> None:
        if not isinstance(segment, str):
            raise InvalidCacheKeyError(segment, self.delimiter)
        if self.strict and self.delimiter in segment:
            raise InvalidCacheKeyError(segment, self.delimiter)

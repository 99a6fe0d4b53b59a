"""Factories building caches and backends from settings."""

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager

from acache.cache.base import Cache
from acache.cache.multilevel import MultiLevelCache
from acache.cache.path_key import PathKeyCache
from acache.core.exceptions import CacheConfigurationError
from acache.core.settings import ACacheSettings
from acache.storage.base import StorageBackend
from acache.storage.filesystem import FilesystemStorage
from acache.storage.memory import InMemoryStorage
from acache.storage.shared import SharedMemoryStorage

BACKENDS = ("filesystem", "memory", "shared", "redis", "s3")


def create_path_key_cache(
    backend: StorageBackend, settings: ACacheSettings | None = None
) -> PathKeyCache:
    """Wrap a backend in a PathKeyCache configured from settings.

    Args:
        backend: The storage backend
        settings: Settings (defaults are read from the environment)

    Returns:
        The configured cache
    """
    settings = settings or ACacheSettings()
    return PathKeyCache(
        backend,
        namespace_delimiter=settings.namespace_delimiter,
        default_ttl=settings.default_ttl,
        strict_keys=settings.strict_keys,
    )


def create_memory_cache(settings: ACacheSettings | None = None) -> PathKeyCache:
    """Create an in-memory cache."""
    return create_path_key_cache(InMemoryStorage(), settings)


def create_filesystem_cache(settings: ACacheSettings | None = None) -> PathKeyCache:
    """Create a filesystem cache rooted at ``settings.cache_dir``."""
    settings = settings or ACacheSettings()
    return create_path_key_cache(
        FilesystemStorage(settings.cache_dir, mode=settings.dir_mode), settings
    )


def create_multilevel_cache(
    stack: Sequence[Cache], settings: ACacheSettings | None = None
) -> MultiLevelCache:
    """Stack caches into a MultiLevelCache, bubbling per ``settings.bubble_on_fetch``.

    Args:
        stack: The caches, highest priority first
        settings: Settings (defaults are read from the environment)

    Returns:
        The multi-level cache
    """
    settings = settings or ACacheSettings()
    return MultiLevelCache(stack, bubble_on_fetch=settings.bubble_on_fetch)


@asynccontextmanager
async def open_storage(
    kind: str, settings: ACacheSettings | None = None
) -> AsyncGenerator[StorageBackend, None]:
    """Open a storage backend by name, closing its connection afterwards.

    Args:
        kind: One of ``BACKENDS``
        settings: Settings (defaults are read from the environment)

    Yields:
        The storage backend

    Raises:
        CacheConfigurationError: If the backend is unknown or not configured
    """
    settings = settings or ACacheSettings()

    if kind == "filesystem":
        yield FilesystemStorage(settings.cache_dir, mode=settings.dir_mode)
    elif kind == "memory":
        yield InMemoryStorage()
    elif kind == "shared":
        yield SharedMemoryStorage(settings.shared_segment)
    elif kind == "redis":
        if not settings.redis_url:
            raise CacheConfigurationError(
                "The redis backend needs a Redis URL", setting="ACACHE_REDIS_URL"
            )
        from acache.storage.redis import RedisStorage

        storage = RedisStorage.from_url(settings.redis_url)
        try:
            yield storage
        finally:
            await storage.client.aclose()
    elif kind == "s3":
        if not settings.s3_bucket:
            raise CacheConfigurationError(
                "The s3 backend needs a bucket name", setting="ACACHE_S3_BUCKET"
            )
        from acache.storage.s3 import S3Storage, open_s3_client

        async with open_s3_client(settings.s3_endpoint_url, settings.s3_region) as client:
            yield S3Storage(client, settings.s3_bucket, prefix=settings.s3_prefix)
    else:
        raise CacheConfigurationError(
            f"Unknown backend '{kind}', expected one of: {', '.join(BACKENDS)}",
            setting="backend",
        )

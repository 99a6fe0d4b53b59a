"""ACache: namespaced key/value caching over pluggable backends, with multi-level stacking."""

__version__ = "0.1.0"

from acache.core.exceptions import (
    ACacheError,
    CacheBackendError,
    CacheConfigurationError,
    InvalidCacheKeyError,
)
from acache.core.settings import ACacheSettings
from acache.core.factory import (
    create_filesystem_cache,
    create_memory_cache,
    create_multilevel_cache,
    create_path_key_cache,
    open_storage,
)

# Caches
from acache.cache import (
    MISSING,
    Cache,
    CacheKeyBuilder,
    MultiLevelCache,
    PathKeyCache,
)

# Storage backends
from acache.storage import (
    CacheEntry,
    FilesystemStorage,
    InMemoryStorage,
    SharedMemoryStorage,
    StorageBackend,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "ACacheError",
    "CacheBackendError",
    "CacheConfigurationError",
    "InvalidCacheKeyError",
    "ACacheSettings",
    "create_filesystem_cache",
    "create_memory_cache",
    "create_multilevel_cache",
    "create_path_key_cache",
    "open_storage",
    # Cache
    "MISSING",
    "Cache",
    "CacheKeyBuilder",
    "MultiLevelCache",
    "PathKeyCache",
    # Storage
    "CacheEntry",
    "FilesystemStorage",
    "InMemoryStorage",
    "SharedMemoryStorage",
    "StorageBackend",
]

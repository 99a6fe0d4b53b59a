"""Pytest fixtures for ACache testing.

To use these fixtures, add to your conftest.py:

    pytest_plugins = ["acache.testing.fixtures"]
"""

import pytest

from acache.cache.path_key import PathKeyCache
from acache.storage.filesystem import FilesystemStorage
from acache.storage.memory import InMemoryStorage
from acache.storage.shared import SharedMemoryStorage
from acache.testing.mocks import FrozenClock, InMemoryS3


@pytest.fixture
def clock() -> FrozenClock:
    """Provide a clock that only moves when advanced."""
    return FrozenClock()


@pytest.fixture
def memory_cache(clock: FrozenClock) -> PathKeyCache:
    """Provide an in-memory cache driven by the frozen clock."""
    return PathKeyCache(InMemoryStorage(), clock=clock)


@pytest.fixture
def filesystem_storage(tmp_path) -> FilesystemStorage:
    """Provide a filesystem storage in a temporary directory."""
    return FilesystemStorage(tmp_path / "cache")


@pytest.fixture
def mock_s3() -> InMemoryS3:
    """Provide in-memory S3 mock with a ``test-bucket`` bucket."""
    s3 = InMemoryS3()
    s3._ensure_bucket("test-bucket")
    yield s3
    s3.clear()


@pytest.fixture(autouse=True)
def reset_shared_storage():
    """Start every test with an empty, available shared store."""
    SharedMemoryStorage.reset()
    SharedMemoryStorage.enable()
    yield
    SharedMemoryStorage.reset()
    SharedMemoryStorage.enable()

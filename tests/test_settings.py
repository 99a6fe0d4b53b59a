"""Tests for settings and factories."""

import pytest
from pydantic import ValidationError

from acache.core.exceptions import CacheConfigurationError
from acache.core.factory import (
    create_filesystem_cache,
    create_memory_cache,
    create_multilevel_cache,
    open_storage,
)
from acache.core.settings import ACacheSettings
from acache.storage.memory import InMemoryStorage
from acache.storage.shared import SharedMemoryStorage


class TestACacheSettings:
    """Tests for ACacheSettings."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Test default values."""
        monkeypatch.chdir(tmp_path)
        settings = ACacheSettings()

        assert settings.namespace_delimiter == "=="
        assert settings.default_ttl == 0
        assert settings.bubble_on_fetch is False

    def test_environment(self, monkeypatch, tmp_path):
        """Test reading ACACHE_ environment variables."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ACACHE_DEFAULT_TTL", "300")
        monkeypatch.setenv("ACACHE_NAMESPACE_DELIMITER", ":")

        settings = ACacheSettings()

        assert settings.default_ttl == 300
        assert settings.namespace_delimiter == ":"

    def test_invalid_values(self):
        """Test validation of settings."""
        with pytest.raises(ValidationError):
            ACacheSettings(namespace_delimiter="")
        with pytest.raises(ValidationError):
            ACacheSettings(default_ttl=-1)
        with pytest.raises(ValidationError):
            ACacheSettings(log_level="LOUD")

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased."""
        assert ACacheSettings(log_level="debug").log_level == "DEBUG"


class TestFactories:
    """Tests for the cache factories."""

    @pytest.mark.asyncio
    async def test_memory_cache(self):
        """Test building a memory cache from settings."""
        cache = create_memory_cache(ACacheSettings(default_ttl=5, namespace_delimiter="/"))

        assert isinstance(cache.backend, InMemoryStorage)
        assert cache.get_default_time_to_live() == 5
        assert cache.namespace_delimiter == "/"

    @pytest.mark.asyncio
    async def test_filesystem_cache(self, tmp_path):
        """Test building a filesystem cache from settings."""
        cache = create_filesystem_cache(ACacheSettings(cache_dir=tmp_path / "cache"))

        assert await cache.save("yin", "yang") is True
        assert await cache.fetch("yin") == "yang"

    @pytest.mark.asyncio
    async def test_multilevel_cache_bubbling_setting(self, monkeypatch, tmp_path):
        """Test that ACACHE_BUBBLE_ON_FETCH controls bubbling of built stacks."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ACACHE_BUBBLE_ON_FETCH", "true")
        settings = ACacheSettings()
        l1, l2 = create_memory_cache(settings), create_memory_cache(settings)

        cache = create_multilevel_cache([l1, l2], settings)
        await l2.save("yin", "yang")

        assert cache.bubble_on_fetch is True
        assert cache.stack == (l1, l2)
        assert await cache.fetch("yin") == "yang"
        assert await l1.fetch("yin") == "yang"

    def test_multilevel_cache_without_bubbling(self, monkeypatch, tmp_path):
        """Test that stacks do not bubble by default."""
        monkeypatch.chdir(tmp_path)
        cache = create_multilevel_cache([create_memory_cache(ACacheSettings())])

        assert cache.bubble_on_fetch is False

    @pytest.mark.asyncio
    async def test_open_shared_storage(self):
        """Test opening the shared backend by name."""
        async with open_storage("shared", ACacheSettings(shared_segment="tests")) as storage:
            assert isinstance(storage, SharedMemoryStorage)
            assert storage.segment == "tests"

    @pytest.mark.asyncio
    async def test_unknown_backend(self):
        """Test that unknown backends are configuration errors."""
        with pytest.raises(CacheConfigurationError):
            async with open_storage("nope", ACacheSettings()):
                pass

    @pytest.mark.asyncio
    async def test_unconfigured_backends(self):
        """Test that remote backends need their connection settings."""
        with pytest.raises(CacheConfigurationError):
            async with open_storage("redis", ACacheSettings(redis_url=None)):
                pass
        with pytest.raises(CacheConfigurationError):
            async with open_storage("s3", ACacheSettings(s3_bucket=None)):
                pass

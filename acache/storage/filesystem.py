"""Filesystem storage backend for ACache."""

import asyncio
import hashlib
import json
import logging
import os
import pickle
from pathlib import Path

from acache.core.exceptions import CacheBackendError, CacheConfigurationError
from acache.storage.base import STATS_SIZE, CacheEntry, StorageBackend

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".cache"
SHARD_WIDTH = 8


class FilesystemStorage(StorageBackend):
    """Storage keeping one file per entry below a root directory.

    Entry files are named after the MD5 hash of the key and spread over
    directories made of its digits (four levels of eight hex digits
    each), so any key maps to a path of fixed length. Each file starts
    with a JSON header line holding the key and expiry, followed by the
    pickled value, so flushing by prefix only reads one line per file.

    Example layout for any key:
        <root>/<md5[0:8]>/<md5[8:16]>/<md5[16:24]>/<md5[24:32]>/<md5>.cache
    """

    def __init__(self, directory: str | os.PathLike, mode: int = 0o777):
        """Initialize the filesystem storage.

        Args:
            directory: Root directory of the cache (created if missing)
            mode: Permissions for directories created by the cache

        Raises:
            CacheConfigurationError: If the directory cannot be created
                or is not writable
        """
        path = Path(directory)
        try:
            self._mkdir(path, mode)
        except OSError as e:
            logger.error(f"Could not create cache directory {path}: {e}")

        if not path.is_dir():
            raise CacheConfigurationError(
                f'The directory "{path}" does not exist and could not be created.',
                setting="directory",
            )
        if not os.access(path, os.W_OK):
            raise CacheConfigurationError(
                f'The directory "{path}" is not writable.', setting="directory"
            )

        self.directory = path.resolve()
        self.mode = mode

    @staticmethod
    def _mkdir(path: Path, mode: int) -> None:
        """Create a directory and its parents, applying mode to each."""
        if path.is_dir():
            return
        FilesystemStorage._mkdir(path.parent, mode)
        if not path.exists():
            path.mkdir(mode=mode)
            path.chmod(mode)

    def path_for(self, key: str) -> Path:
        """Get the file path for a key.

        Args:
            key: The composed cache key

        Returns:
            Path of the entry file
        """
        digest = hashlib.md5(key.encode("utf-8")).hexdigest()
        shards = [digest[i:i + SHARD_WIDTH] for i in range(0, len(digest), SHARD_WIDTH)]
        return self.directory.joinpath(*shards, digest + ENTRY_SUFFIX)

    @staticmethod
    def _read_header(path: Path) -> dict:
        with path.open("rb") as fh:
            return json.loads(fh.readline())

    @staticmethod
    def _read_entry(path: Path) -> CacheEntry:
        with path.open("rb") as fh:
            header = json.loads(fh.readline())
            value = pickle.loads(fh.read())
        return CacheEntry(value=value, expires_at=header["expires_at"])

    def _get(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            return self._read_entry(path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, pickle.UnpicklingError, EOFError) as e:
            raise CacheBackendError(
                f"Could not read cache entry {path}",
                operation="get",
                key=key,
                original_error=e,
            ) from e

    def _put(self, key: str, entry: CacheEntry) -> bool:
        path = self.path_for(key)
        header = json.dumps({"key": key, "expires_at": entry.expires_at})
        try:
            payload = pickle.dumps(entry.value, protocol=pickle.HIGHEST_PROTOCOL)
            self._mkdir(path.parent, self.mode)
            tmp = path.with_name(path.name + ".tmp")
            with tmp.open("wb") as fh:
                fh.write(header.encode("utf-8") + b"\n")
                fh.write(payload)
            tmp.replace(path)
            return True
        except (OSError, pickle.PicklingError, TypeError, AttributeError) as e:
            logger.error(f"Failed to write cache entry {path}: {e}")
            return False

    def _delete(self, key: str) -> bool:
        try:
            self.path_for(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete cache entry for {key}: {e}")
            return False

    def _entry_files(self):
        return (p for p in self.directory.rglob("*" + ENTRY_SUFFIX) if p.is_file())

    def _flush(self, prefix: str | None) -> bool:
        flushed = True
        for path in self._entry_files():
            try:
                if prefix is not None and not self._read_header(path)["key"].startswith(prefix):
                    continue
                path.unlink()
            except FileNotFoundError:
                continue
            except (OSError, ValueError, KeyError) as e:
                logger.error(f"Failed to flush cache entry {path}: {e}")
                flushed = False
        return flushed

    async def get(self, key: str) -> CacheEntry | None:
        return await asyncio.to_thread(self._get, key)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self.path_for(key).is_file)

    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        return await asyncio.to_thread(self._put, key, entry)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)

    async def flush(self, prefix: str | None = None) -> bool:
        return await asyncio.to_thread(self._flush, prefix)

    async def stats(self) -> dict:
        size = await asyncio.to_thread(lambda: sum(1 for _ in self._entry_files()))
        return {STATS_SIZE: size}

    async def available(self) -> bool:
        return self.directory.is_dir() and os.access(self.directory, os.W_OK)

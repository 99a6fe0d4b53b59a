"""S3 storage backend for ACache."""

import logging
import pickle
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Protocol, runtime_checkable

from aiobotocore.session import get_session
from botocore.config import Config
from botocore.exceptions import ClientError

from acache.core.exceptions import CacheBackendError
from acache.storage.base import STATS_SIZE, CacheEntry, StorageBackend

logger = logging.getLogger(__name__)

MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


@runtime_checkable
class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations used by the storage."""

    async def get_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Get an object from S3."""
        ...

    async def put_object(
        self, Bucket: str, Key: str, Body: bytes | str, **kwargs
    ) -> dict[str, Any]:
        """Put an object to S3."""
        ...

    async def delete_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Delete an object from S3."""
        ...

    async def list_objects_v2(self, Bucket: str, **kwargs) -> dict[str, Any]:
        """List objects in S3."""
        ...

    async def head_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Get object metadata."""
        ...

    async def head_bucket(self, Bucket: str, **kwargs) -> dict[str, Any]:
        """Check that a bucket exists."""
        ...


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in MISSING_CODES


@asynccontextmanager
async def open_s3_client(
    endpoint_url: str | None = None,
    region_name: str | None = None,
    retry_attempts: int = 3,
) -> AsyncGenerator[S3ClientProtocol, None]:
    """Open an aiobotocore S3 client.

    Credentials come from the usual AWS environment/config chain.

    Args:
        endpoint_url: Custom endpoint (e.g. LocalStack or MinIO)
        region_name: AWS region
        retry_attempts: Maximum attempts for retried requests

    Yields:
        An S3 client
    """
    config = Config(
        s3={"addressing_style": "path"},
        retries={"max_attempts": retry_attempts, "mode": "standard"},
    )
    session = get_session()
    async with session.create_client(
        "s3", region_name=region_name, endpoint_url=endpoint_url, config=config
    ) as client:
        yield client


class S3Storage(StorageBackend):
    """Storage keeping one S3 object per entry.

    Objects are written below ``prefix`` in the bucket. The expiry
    timestamp is also stored as object metadata so lifecycle tooling
    can see it; S3 itself does not purge expired entries.
    """

    def __init__(
        self,
        client: S3ClientProtocol,
        bucket: str,
        prefix: str = "acache/",
    ):
        """Initialize the S3 storage.

        Args:
            client: An async S3 client (aiobotocore or compatible)
            bucket: The bucket holding the entries
            prefix: Object key prefix for all entries
        """
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    def object_key(self, key: str) -> str:
        """Get the S3 object key for a cache key."""
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> CacheEntry | None:
        try:
            response = await self.client.get_object(
                Bucket=self.bucket, Key=self.object_key(key)
            )
            body = await response["Body"].read()
        except ClientError as e:
            if _is_missing(e):
                return None
            raise CacheBackendError(
                f"S3 get_object failed for {key}", operation="get", key=key, original_error=e
            ) from e

        try:
            return pickle.loads(body)
        except (pickle.UnpicklingError, EOFError, AttributeError, ValueError) as e:
            raise CacheBackendError(
                f"Could not decode S3 entry {key}", operation="get", key=key, original_error=e
            ) from e

    async def exists(self, key: str) -> bool:
        try:
            await self.client.head_object(Bucket=self.bucket, Key=self.object_key(key))
            return True
        except ClientError as e:
            if _is_missing(e):
                return False
            raise CacheBackendError(
                f"S3 head_object failed for {key}",
                operation="exists",
                key=key,
                original_error=e,
            ) from e

    async def put(self, key: str, entry: CacheEntry, ttl: int = 0) -> bool:
        try:
            await self.client.put_object(
                Bucket=self.bucket,
                Key=self.object_key(key),
                Body=pickle.dumps(entry, protocol=pickle.HIGHEST_PROTOCOL),
                ContentType="application/octet-stream",
                Metadata={"expires-at": str(entry.expires_at)},
            )
            return True
        except (ClientError, pickle.PicklingError, TypeError, AttributeError) as e:
            logger.error(f"Failed to store {key} in s3://{self.bucket}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            if not await self.exists(key):
                return False
            await self.client.delete_object(Bucket=self.bucket, Key=self.object_key(key))
            return True
        except (ClientError, CacheBackendError) as e:
            logger.error(f"Failed to delete {key} from s3://{self.bucket}: {e}")
            return False

    async def _iter_object_keys(self, prefix: str) -> AsyncGenerator[str, None]:
        token = None
        while True:
            kwargs = {"Bucket": self.bucket, "Prefix": prefix}
            if token:
                kwargs["ContinuationToken"] = token
            response = await self.client.list_objects_v2(**kwargs)
            for obj in response.get("Contents", []):
                yield obj["Key"]
            if not response.get("IsTruncated"):
                return
            token = response.get("NextContinuationToken")

    async def flush(self, prefix: str | None = None) -> bool:
        """Delete all entries, or all entries with a key prefix."""
        try:
            object_keys = [
                object_key
                async for object_key in self._iter_object_keys(self.object_key(prefix or ""))
            ]
            for object_key in object_keys:
                await self.client.delete_object(Bucket=self.bucket, Key=object_key)
            return True
        except ClientError as e:
            logger.error(f"Failed to flush s3://{self.bucket}/{self.prefix}: {e}")
            return False

    async def stats(self) -> dict:
        size = 0
        async for _ in self._iter_object_keys(self.prefix):
            size += 1
        return {STATS_SIZE: size, "bucket": self.bucket}

    async def available(self) -> bool:
        try:
            await self.client.head_bucket(Bucket=self.bucket)
            return True
        except ClientError:
            return False

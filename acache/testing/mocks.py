"""Test doubles for ACache: a controllable clock and an in-memory S3."""

from datetime import datetime, timezone
from typing import Dict
from unittest.mock import AsyncMock

from botocore.exceptions import ClientError


class FrozenClock:
    """Clock that only moves when told to.

    Pass an instance as the ``clock`` of a ``PathKeyCache`` to simulate
    the passing of time:

        >>> clock = FrozenClock()
        >>> cache = PathKeyCache(InMemoryStorage(), clock=clock)
        >>> clock.advance(60)
    """

    def __init__(self, now: float = 1_700_000_000.0):
        """Initialize the clock.

        Args:
            now: Initial UNIX timestamp
        """
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += seconds


class TickingClock(FrozenClock):
    """Clock that moves forward by a fixed step every time it is read."""

    def __init__(self, now: float = 1_700_000_000.0, step: float = 0.5):
        super().__init__(now)
        self.step = step

    def __call__(self) -> float:
        now = self.now
        self.now += self.step
        return now


class InMemoryS3:
    """In-memory S3 mock for testing without external dependencies.

    Implements the S3 operations used by ``S3Storage`` and raises
    botocore ``ClientError`` the way a real client does.

    Example:
        >>> s3 = InMemoryS3()
        >>> await s3.put_object(Bucket="test", Key="entry", Body=b"...")
        >>> response = await s3.get_object(Bucket="test", Key="entry")
        >>> data = await response["Body"].read()
    """

    def __init__(self):
        """Initialize the in-memory S3 mock."""
        # Storage: {bucket_name: {key: bytes}}
        self._storage: Dict[str, Dict[str, bytes]] = {}
        # Metadata: {bucket_name: {key: dict}}
        self._metadata: Dict[str, Dict[str, dict]] = {}

    def _ensure_bucket(self, bucket: str) -> None:
        """Ensure a bucket exists in storage."""
        if bucket not in self._storage:
            self._storage[bucket] = {}
            self._metadata[bucket] = {}

    async def create_bucket(self, Bucket: str, **kwargs) -> dict:
        self._ensure_bucket(Bucket)
        return {}

    async def head_bucket(self, Bucket: str, **kwargs) -> dict:
        if Bucket not in self._storage:
            raise ClientError(
                {"Error": {"Code": "404", "Message": "Bucket not found"}},
                "HeadBucket"
            )
        return {}

    async def put_object(
        self,
        Bucket: str,
        Key: str,
        Body: bytes | str,
        ContentType: str = "application/octet-stream",
        Metadata: dict | None = None,
        **kwargs
    ) -> dict:
        self._ensure_bucket(Bucket)

        if isinstance(Body, str):
            Body = Body.encode("utf-8")

        self._storage[Bucket][Key] = Body
        self._metadata[Bucket][Key] = {
            "ContentType": ContentType,
            "ContentLength": len(Body),
            "LastModified": datetime.now(timezone.utc),
            "ETag": f'"{hash(Body)}"',
            "Metadata": dict(Metadata or {}),
        }

        return {"ETag": self._metadata[Bucket][Key]["ETag"]}

    async def get_object(self, Bucket: str, Key: str, **kwargs) -> dict:
        if Bucket not in self._storage or Key not in self._storage[Bucket]:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
                "GetObject"
            )

        body = AsyncMock()
        body.read = AsyncMock(return_value=self._storage[Bucket][Key])

        metadata = self._metadata[Bucket].get(Key, {})

        return {
            "Body": body,
            "ContentType": metadata.get("ContentType", "application/octet-stream"),
            "ContentLength": metadata.get("ContentLength", len(self._storage[Bucket][Key])),
            "Metadata": metadata.get("Metadata", {}),
        }

    async def head_object(self, Bucket: str, Key: str, **kwargs) -> dict:
        if Bucket not in self._storage or Key not in self._storage[Bucket]:
            raise ClientError(
                {"Error": {"Code": "404", "Message": "Not Found"}},
                "HeadObject"
            )

        metadata = self._metadata[Bucket].get(Key, {})
        return {
            "ContentLength": metadata.get("ContentLength", len(self._storage[Bucket][Key])),
            "ContentType": metadata.get("ContentType", "application/octet-stream"),
            "Metadata": metadata.get("Metadata", {}),
        }

    async def delete_object(self, Bucket: str, Key: str, **kwargs) -> dict:
        if Bucket in self._storage and Key in self._storage[Bucket]:
            del self._storage[Bucket][Key]
            self._metadata[Bucket].pop(Key, None)
        return {}

    async def list_objects_v2(
        self,
        Bucket: str,
        Prefix: str = "",
        MaxKeys: int = 1000,
        ContinuationToken: str | None = None,
        **kwargs
    ) -> dict:
        if Bucket not in self._storage:
            return {"KeyCount": 0}

        all_keys = sorted(
            key for key in self._storage[Bucket] if key.startswith(Prefix)
        )

        start_idx = int(ContinuationToken) if ContinuationToken else 0
        end_idx = start_idx + MaxKeys
        page_keys = all_keys[start_idx:end_idx]

        if not page_keys:
            return {"KeyCount": 0}

        result = {
            "Contents": [
                {"Key": key, "Size": len(self._storage[Bucket][key])}
                for key in page_keys
            ],
            "KeyCount": len(page_keys),
            "MaxKeys": MaxKeys,
            "Prefix": Prefix,
            "IsTruncated": end_idx < len(all_keys),
        }

        if result["IsTruncated"]:
            result["NextContinuationToken"] = str(end_idx)

        return result

    def keys(self, bucket: str) -> list[str]:
        """List stored object keys (for testing assertions)."""
        return sorted(self._storage.get(bucket, {}))

    def clear(self) -> None:
        """Clear all stored data."""
        self._storage.clear()
        self._metadata.clear()

"""Settings for ACache, read from the environment."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ACacheSettings(BaseSettings):
    """ACache configuration.

    Every field can be set through an ``ACACHE_``-prefixed environment
    variable (e.g. ``ACACHE_DEFAULT_TTL=300``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACACHE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Keys and lifetimes
    namespace_delimiter: str = Field(default="==", description="Separator between namespace segments")
    strict_keys: bool = Field(default=False, description="Reject ids containing the delimiter")
    default_ttl: int = Field(default=0, ge=0, description="Default TTL in seconds (0 = never expires)")
    bubble_on_fetch: bool = Field(default=False, description="Restore lower-tier hits in higher tiers")

    # Filesystem backend
    cache_dir: Path = Field(default=Path(".acache"), description="Root directory of the filesystem cache")
    dir_mode: int = Field(default=0o777, ge=0, le=0o7777, description="Mode for created directories")

    # Redis backend
    redis_url: str | None = Field(default=None, description="Redis URL, e.g. redis://localhost:6379/0")

    # S3 backend
    s3_bucket: str | None = Field(default=None, description="Bucket for the S3 backend")
    s3_prefix: str = Field(default="acache/", description="Object key prefix for the S3 backend")
    s3_endpoint_url: str | None = Field(default=None, description="Custom S3 endpoint (LocalStack, MinIO)")
    s3_region: str | None = Field(default=None, description="AWS region for the S3 backend")

    # Shared in-process backend
    shared_segment: str = Field(default="default", description="Segment name of the shared store")

    log_level: str = Field(default="WARNING", description="Log level used by the CLI")

    @field_validator("namespace_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if not v:
            raise ValueError("namespace_delimiter must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

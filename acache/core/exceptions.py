"""Custom exceptions for ACache.

This module provides a hierarchy of exceptions with helpful error messages.
Cache misses are never reported through exceptions; failed writes are
reported as ``False`` return values.
"""


class ACacheError(Exception):
    """Base exception for all ACache errors.

    All ACache exceptions inherit from this class, making it easy
    to catch all library-specific errors.
    """

    def __init__(self, message: str, hint: str | None = None):
        """Initialize the exception.

        Args:
            message: The error message
            hint: Optional hint for resolving the error
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class CacheConfigurationError(ACacheError):
    """Raised when a cache cannot be constructed from the given configuration."""

    def __init__(
        self,
        message: str | None = None,
        setting: str | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Custom error message
            setting: Name of the offending setting or argument
        """
        self.setting = setting

        if setting:
            hint = f"Check the value passed for '{setting}'."
        else:
            hint = "Check your ACache configuration."

        super().__init__(message or "Invalid ACache configuration", hint)


class InvalidCacheKeyError(ACacheError):
    """Raised when an id or namespace segment cannot be composed into a key."""

    def __init__(self, segment: object, delimiter: str):
        """Initialize the key error.

        Args:
            segment: The offending id or namespace segment
            delimiter: The configured namespace delimiter
        """
        self.segment = segment
        self.delimiter = delimiter

        if isinstance(segment, str):
            message = f"Key segment {segment!r} contains the namespace delimiter {delimiter!r}"
            hint = "Use a different namespace delimiter or strip it from ids."
        else:
            message = f"Key segment {segment!r} is not a string"
            hint = "Ids and namespace segments must be strings."

        super().__init__(message, hint)


class CacheBackendError(ACacheError):
    """Raised when a storage backend fails in a way that is not a cache miss."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the backend error.

        Args:
            message: The error message
            operation: The backend operation that failed (e.g., 'put')
            key: The composed cache key involved
            original_error: The original exception
        """
        self.operation = operation
        self.key = key
        self.original_error = original_error

        hint = None
        if isinstance(original_error, PermissionError):
            hint = "Check the permissions of the cache directory."
        elif isinstance(original_error, ConnectionError):
            hint = "Check that the cache server is reachable."

        super().__init__(message, hint)

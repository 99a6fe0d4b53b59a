"""Testing utilities for ACache.

Usage in conftest.py:
    pytest_plugins = ["acache.testing.fixtures"]

Or import the doubles directly:
    from acache.testing import FrozenClock, InMemoryS3
"""

from acache.testing.mocks import FrozenClock, InMemoryS3, TickingClock

__all__ = [
    "FrozenClock",
    "InMemoryS3",
    "TickingClock",
]

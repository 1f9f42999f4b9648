"""Cache store protocol (DIP). Implemented by infrastructure cache stores."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends (e.g. Redis, in-process memory).

    A missing key and a stored None are indistinguishable: get() returns
    None for both, and None is never written by remember().
    """

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Absent keys are not an error."""
        ...

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return cached value; on miss await compute(), store it for ttl seconds and return it.

        If compute() raises, nothing is stored and the exception propagates.
        """
        ...

"""In-process cache store with per-key expiry.

For single-process deployments, tests and local development. Values are
stored by reference (no serialization).
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Internal representation of a cache entry with expiry."""

    value: Any
    expires_at: float  # time.monotonic() deadline


class MemoryCacheStore:
    """Dictionary-backed CacheProtocol implementation."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty store.

        Args:
            clock: Monotonic clock in seconds; injectable for tests.
        """
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    def __len__(self) -> int:
        self._prune()
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._live_entry(key) is not None

    def keys(self) -> set[str]:
        """Return the set of live keys."""
        self._prune()
        return set(self._entries)

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._live_entry(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        if ttl <= 0:
            return False
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        if self._entries.pop(key, None) is not None:
            logger.debug("Cache DELETE: %s", key)
        return True

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return cached value; on miss compute, store and return it (None is not stored)."""
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def _prune(self) -> None:
        now = self._clock()
        expired = [k for k, v in self._entries.items() if now >= v.expires_at]
        for k in expired:
            del self._entries[k]

"""Redis-based cache store.

Async Redis with JSON serialization and TTL support. Connection errors
trigger one reconnect attempt; after that the store degrades to a cache
miss (get/remember compute) or a False return (set/delete).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from entity_cache.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Async Redis cache store implementing CacheProtocol.

    Values must be JSON-serializable. Call connect() at startup and
    disconnect() at shutdown.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            redis_client: Optional Redis client for testing or DI; treated as
                connected.
            settings: Optional Settings (redis_host, redis_port, ...).
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on startup.

        A no-op when REDIS_ENABLED is false; the store then stays unavailable.
        """
        if not self.settings.redis_enabled:
            logger.info("Redis cache disabled by configuration")
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis cache connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis connection failed: %s. Cache disabled.", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after a connection error. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Ignoring error while closing broken Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _execute(
        self, action: str, key: str, command: Callable[[redis.Redis], Awaitable[Any]]
    ) -> tuple[bool, Any]:
        """Run command against the client, retrying once after a reconnect.

        Returns:
            (True, result) on success, (False, None) when Redis failed or is
            unavailable. Failures are logged, never raised.
        """
        if not self.is_available() or self.redis is None:
            return False, None
        try:
            return True, await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect() or self.redis is None:
                logger.warning("Cache %s unavailable for key %s (Redis disconnected)", action, key)
                return False, None
            try:
                return True, await command(self.redis)
            except redis.RedisError:
                logger.exception("Cache %s error for key %s after reconnect", action, key)
                return False, None
        except redis.RedisError:
            logger.exception("Cache %s error for key %s", action, key)
            return False, None

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""
        ok, value = await self._execute("get", key, lambda client: client.get(key))
        if not ok:
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        serialized = json.dumps(value)
        ok, _ = await self._execute(
            "set", key, lambda client: client.setex(key, ttl, serialized)
        )
        if ok:
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return ok

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True unless Redis failed."""
        ok, _ = await self._execute("delete", key, lambda client: client.delete(key))
        if ok:
            logger.debug("Cache DELETE: %s", key)
        return ok

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return cached value; on miss compute, store and return it.

        When Redis is unavailable this is a pass-through to compute().
        None results are returned but not stored.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        if value is not None:
            await self.set(key, value, ttl)
        return value

"""Cache stores: Redis and in-process memory implementations of CacheProtocol."""

from entity_cache.infrastructure.cache.memory_cache import MemoryCacheStore
from entity_cache.infrastructure.cache.redis_cache import RedisCacheStore

__all__ = ["MemoryCacheStore", "RedisCacheStore"]

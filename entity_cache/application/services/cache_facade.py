"""Cache facade: put / remember / forget and template-driven bust for one entity type.

Composed into entity repositories (not subclassed). Keys passed to put,
remember and forget are relative ("42", "42.data", "email.a-b-com") and
get the type prefix; already-prefixed keys are left alone.

remember() is single-flight per key: concurrent misses share one compute.
forget() and bust_cache() detach any in-flight compute for the key, so a
compute started before the eviction never repopulates it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sized
from dataclasses import dataclass
from typing import Any, TypeVar

from entity_cache.application.interfaces.cache import CacheProtocol
from entity_cache.application.interfaces.entities import (
    EntityProtocol,
    StorageAwareEntity,
)
from entity_cache.application.services.entity_registry import (
    EntityDescriptor,
    RegisteredEntityType,
)
from entity_cache.application.services.key_prefix_resolver import (
    KeyPrefixResolver,
    prefix_key,
)
from entity_cache.application.services.template_engine import TemplateEngine
from entity_cache.application.services.ttl_manager import TtlManager
from entity_cache.core.config import Settings, get_settings
from entity_cache.shared.telemetry.logging import get_logger
from entity_cache.shared.utils.slug import slugify

T = TypeVar("T")


@dataclass(eq=False)
class _Flight:
    """One in-flight remember() compute for a prefixed key.

    stale is set when the key is evicted; writing once the compute has
    finished and the store write has begun.
    """

    task: asyncio.Task[Any] | None = None
    stale: bool = False
    writing: bool = False


class _StaleComputation(Exception):
    """Raised inside the store's compute step so a stale result is not stored."""

    def __init__(self, value: Any) -> None:
        super().__init__("cache key was evicted while computing")
        self.value = value


def _is_empty(value: Any) -> bool:
    """None, "" and empty collections are not cacheable; 0 and False are."""
    if value is None:
        return True
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _consume_exception(task: asyncio.Task[Any]) -> None:
    """Mark a failed flight's exception as retrieved when nobody awaited it."""
    if not task.cancelled():
        task.exception()


class CacheFacade:
    """Read-through cache and invalidation for one registered entity type."""

    def __init__(
        self,
        entity_type: RegisteredEntityType | EntityDescriptor,
        store: CacheProtocol,
        *,
        resolver: KeyPrefixResolver | None = None,
        engine: TemplateEngine | None = None,
        ttl_manager: TtlManager | None = None,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            entity_type: Registered type, or a descriptor to validate now.
            store: Cache store (Redis, memory, ...).
            resolver: Prefix resolver (storage-aware prefixes and derivation).
            engine: Template engine; default uses settings.cache_relation_batch_size.
            ttl_manager: TTL manager; default uses settings cache_ttl / cache_ttl_max.
            settings: Optional Settings for testing or DI.
            logger: Diagnostics sink; defaults to this module's logger.
        """
        self._settings = settings or get_settings()
        self._resolver = resolver or KeyPrefixResolver()
        if isinstance(entity_type, EntityDescriptor):
            entity_type = RegisteredEntityType.from_descriptor(entity_type, self._resolver)
        self._type = entity_type
        self._store = store
        self._engine = engine or TemplateEngine(self._settings.cache_relation_batch_size)
        self._ttl = ttl_manager or TtlManager(settings=self._settings)
        self._logger = logger or get_logger(__name__)
        self._in_flight: dict[str, _Flight] = {}
        # Evicted flights whose store write may still land; drained before a new flight.
        self._draining: dict[str, list[_Flight]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def prefix(self) -> str:
        return self._type.prefix

    @property
    def entity_type(self) -> RegisteredEntityType:
        return self._type

    @property
    def ttl(self) -> int:
        """Default TTL in minutes."""
        return self._ttl.ttl

    def set_ttl(self, value: Any) -> int:
        """Set the default TTL (minutes), clamped to the configured maximum."""
        return self._ttl.set_ttl(value)

    def key(self, key: Any) -> str:
        """Return the prefixed form of a relative key."""
        return prefix_key(self.prefix, str(key))

    def slug(self, value: Any) -> str:
        """Slug used for key segments (e.g. "email." + slug(email))."""
        return slugify(value)

    async def put(self, key: Any, value: Any, ttl: Any = None) -> bool:
        """Store value under the prefixed key.

        ttl is a one-off override in minutes, clamped to the maximum; it does
        not change the default.

        Returns:
            False without touching the store when key or value is empty,
            otherwise the store's result.
        """
        if key is None or key == "" or _is_empty(value):
            self._logger.debug("Refusing to cache empty key or value (key=%r)", key)
            return False
        return await self._store.set(self.key(key), value, self._ttl.ttl_seconds(ttl))

    async def set(self, key: Any, value: Any, ttl: Any = None) -> bool:
        """Alias for put()."""
        return await self.put(key, value, ttl)

    async def remember(
        self,
        key: Any,
        compute: Callable[[], Awaitable[T]],
        ttl: Any = None,
    ) -> T:
        """Return the cached value for key, computing and caching it on a miss.

        Concurrent callers for the same key share a single compute and get
        the same result (or exception). The compute runs in its own task, so
        cancelling one caller does not cancel it for the others.

        If the key is forgotten while compute runs, the result is returned
        to the callers already waiting but is not written to the store; a
        write already in progress is evicted again once it lands.
        """
        full_key = self.key(key)
        flight = self._in_flight.get(full_key)
        if flight is None:
            pending = [f.task for f in self._draining.get(full_key, ()) if f.task is not None]
            if pending:
                await asyncio.wait(pending)
            flight = self._in_flight.get(full_key)
        if flight is None:
            flight = _Flight()
            self._in_flight[full_key] = flight
            flight.task = asyncio.create_task(
                self._compute_flight(full_key, flight, compute, ttl)
            )
            flight.task.add_done_callback(_consume_exception)
            self._tasks.add(flight.task)
            flight.task.add_done_callback(self._tasks.discard)
        return await asyncio.shield(flight.task)

    async def _compute_flight(
        self,
        full_key: str,
        flight: _Flight,
        compute: Callable[[], Awaitable[T]],
        ttl: Any,
    ) -> T:
        async def guarded_compute() -> T:
            value = await compute()
            if flight.stale:
                raise _StaleComputation(value)
            flight.writing = True
            return value

        try:
            try:
                value = await self._store.remember(
                    full_key, self._ttl.ttl_seconds(ttl), guarded_compute
                )
            except _StaleComputation as stale:
                self._logger.debug("Not caching %s: evicted during compute", full_key)
                return stale.value
            if flight.stale:
                self._logger.debug("Evicting %s again: evicted during store write", full_key)
                await self._store.delete(full_key)
            return value
        finally:
            if self._in_flight.get(full_key) is flight:
                del self._in_flight[full_key]
            draining = self._draining.get(full_key)
            if draining is not None and flight in draining:
                draining.remove(flight)
                if not draining:
                    del self._draining[full_key]

    async def forget(self, key: Any) -> None:
        """Evict the prefixed key. Forgetting an absent key is a no-op."""
        await self._evict(self.key(key))

    async def bust_cache(self, resource: Any) -> set[str]:
        """Evict every key the entity type's templates yield for resource.

        Args:
            resource: Entity, or an id / slug resolved through the descriptor's
                find_by_id then find_by_slug.

        Returns:
            Keys that eviction was attempted for (empty when unresolved).
        """
        entity = await self._resolve(resource)
        if entity is None:
            if self._settings.debug:
                self._logger.error(
                    "Error busting cache. Resource not found: %s %r",
                    self._type.name,
                    resource,
                )
            return set()

        keys = await self.keys_for(entity)
        for key in sorted(keys):
            try:
                await self._evict(key)
            except Exception:
                self._logger.exception("Failed to evict cache key %s", key)
        self._logger.debug("Busted %d cache keys for %s", len(keys), self._type.name)
        return keys

    async def keys_for(self, entity: EntityProtocol) -> set[str]:
        """Return the keys bust_cache() would evict for entity, without evicting."""
        prefix = (
            self._resolver.prefix_for(entity)
            if isinstance(entity, StorageAwareEntity)
            else self.prefix
        )
        return await self._engine.expand(
            entity, self._type.templates, prefix=prefix, relations=self._type.relations
        )

    async def _evict(self, full_key: str) -> None:
        flight = self._in_flight.pop(full_key, None)
        if flight is not None:
            flight.stale = True
            if flight.writing:
                self._draining.setdefault(full_key, []).append(flight)
        await self._store.delete(full_key)

    async def _resolve(self, resource: Any) -> EntityProtocol | None:
        """Return resource if it is an entity, else look it up by id then slug."""
        if resource is None or isinstance(resource, bool):
            return None
        if isinstance(resource, EntityProtocol):
            return resource
        descriptor = self._type.descriptor
        entity = None
        if descriptor.find_by_id is not None:
            entity = await descriptor.find_by_id(resource)
        if entity is None and isinstance(resource, str) and descriptor.find_by_slug is not None:
            entity = await descriptor.find_by_slug(resource)
        return entity

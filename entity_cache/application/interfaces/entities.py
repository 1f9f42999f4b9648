"""Entity-store ports: what the key engine needs from entities and lookups."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EntityProtocol(Protocol):
    """Read-only view of an entity's scalar fields."""

    def get(self, field: str) -> Any:
        """Return the field value, or None when the entity has no such field."""
        ...


@runtime_checkable
class StorageAwareEntity(Protocol):
    """Entity that knows its storage name (e.g. SQL table).

    The storage name is authoritative for the key prefix.
    """

    def get(self, field: str) -> Any: ...

    def storage_name(self) -> str:
        """Return the storage (table/collection) name."""
        ...


# (entity, batch_size) -> async iterator of batches of related entities
RelationAccessor = Callable[[Any, int], AsyncIterator[Sequence[EntityProtocol]]]

# id or slug -> entity, or None when not found
EntityLookup = Callable[[Any], Awaitable[EntityProtocol | None]]

"""Base repository: generic CRUD and lifecycle hooks that bust the entity's cache keys."""

from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from entity_cache.application.services.cache_facade import CacheFacade
from entity_cache.infrastructure.persistence.database import Base
from entity_cache.infrastructure.persistence.entities import SqlAlchemyEntity

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, get_all, create, update, delete and hooks.

    The cache facade is composed, not inherited: when set, create/update/delete
    bust every key the facade's templates derive for the affected row.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        cache: CacheFacade | None = None,
    ) -> None:
        self.db = db
        self.model = model
        self.cache = cache

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None (never cached)."""
        return await self.db.get(self.model, entity_id)

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination, ordered by primary key."""
        order_by = list(sa_inspect(self.model).primary_key)
        result = await self.db.execute(
            select(self.model).order_by(*order_by).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on obj and run _on_after_update hook.

        Raises:
            ValueError: If a primary key value is missing on obj.
        """
        for col in sa_inspect(self.model).primary_key:
            if getattr(obj, col.key) is None:
                raise ValueError(
                    f"Cannot update: primary key '{col.key}' is missing on "
                    f"{self.model.__name__} instance."
                )
        obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Run _on_before_delete hook then delete the record."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def bust_cache(self, obj: ModelType) -> set[str]:
        """Evict every cache key derived for obj; empty set when uncached."""
        if self.cache is None:
            return set()
        return await self.cache.bust_cache(SqlAlchemyEntity(obj))

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to warm caches or emit events."""

    async def _on_after_update(self, obj: ModelType) -> None:
        await self.bust_cache(obj)

    async def _on_before_delete(self, obj: ModelType) -> None:
        await self.bust_cache(obj)

"""SQLAlchemy adapters for the key engine: ORM instance -> entity, relationship -> accessor."""

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, with_parent

from entity_cache.application.interfaces.entities import RelationAccessor


class SqlAlchemyEntity:
    """Storage-aware entity view of a loaded ORM instance.

    get() reads mapped columns only; relationships and unknown names are
    absent (None). storage_name() is the mapped table name.
    """

    def __init__(self, instance: Any) -> None:
        self.instance = instance
        self._mapper = sa_inspect(type(instance))

    def get(self, field: str) -> Any:
        if field not in self._mapper.column_attrs.keys():
            return None
        return getattr(self.instance, field)

    def storage_name(self) -> str:
        return self._mapper.local_table.name

    def __repr__(self) -> str:
        return f"SqlAlchemyEntity({self.instance!r})"


def relation_accessor(
    db: AsyncSession, relationship: InstrumentedAttribute[Any]
) -> RelationAccessor:
    """Accessor that pages a relationship with offset/limit, ordered by primary key.

    Args:
        db: Session used for the relation queries.
        relationship: Relationship attribute, e.g. User.organizations.

    Returns:
        Callable(entity, batch_size) yielding lists of SqlAlchemyEntity.
    """
    target = relationship.property.mapper.class_
    order_by = list(sa_inspect(target).primary_key)

    async def accessor(
        entity: SqlAlchemyEntity, batch_size: int
    ) -> AsyncIterator[list[SqlAlchemyEntity]]:
        offset = 0
        while True:
            result = await db.execute(
                select(target)
                .where(with_parent(entity.instance, relationship))
                .order_by(*order_by)
                .offset(offset)
                .limit(batch_size)
            )
            batch = [SqlAlchemyEntity(row) for row in result.scalars().all()]
            if batch:
                yield batch
            if len(batch) < batch_size:
                return
            offset += batch_size

    return accessor

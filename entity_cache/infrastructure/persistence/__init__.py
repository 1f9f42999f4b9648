"""SQLAlchemy entity-store adapter: models, entity views and cached repositories."""

from entity_cache.infrastructure.persistence.database import Base, create_session_factory
from entity_cache.infrastructure.persistence.entities import (
    SqlAlchemyEntity,
    relation_accessor,
)

__all__ = ["Base", "SqlAlchemyEntity", "create_session_factory", "relation_accessor"]

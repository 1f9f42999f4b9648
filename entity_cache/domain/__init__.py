"""Domain layer: entities, key template value objects and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from entity_cache.domain.entities import Record, record_relation
from entity_cache.domain.exceptions import (
    EntityCacheException,
    EntityTypeAlreadyRegisteredException,
    EntityTypeNotRegisteredException,
    MalformedTemplateException,
)
from entity_cache.domain.value_objects import (
    KeyTemplate,
    RelationPlaceholder,
    ScalarPlaceholder,
)

__all__ = [
    # Entities
    "Record",
    "record_relation",
    # Exceptions
    "EntityCacheException",
    "EntityTypeAlreadyRegisteredException",
    "EntityTypeNotRegisteredException",
    "MalformedTemplateException",
    # Value objects
    "KeyTemplate",
    "RelationPlaceholder",
    "ScalarPlaceholder",
]

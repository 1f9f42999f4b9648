"""Application interfaces (ports): cache store, entity and repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from entity_cache.infrastructure.
"""

from entity_cache.application.interfaces.cache import CacheProtocol
from entity_cache.application.interfaces.entities import (
    EntityLookup,
    EntityProtocol,
    RelationAccessor,
    StorageAwareEntity,
)
from entity_cache.application.interfaces.repositories import IUserRepository

__all__ = [
    "CacheProtocol",
    "EntityLookup",
    "EntityProtocol",
    "IUserRepository",
    "RelationAccessor",
    "StorageAwareEntity",
]

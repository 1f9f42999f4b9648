"""Persistence repositories. Re-exports for dependency injection."""

from entity_cache.infrastructure.persistence.repositories.base import BaseRepository
from entity_cache.infrastructure.persistence.repositories.user_repo import (
    USER_CACHE_KEYS,
    UserRepository,
)

__all__ = ["BaseRepository", "USER_CACHE_KEYS", "UserRepository"]

"""Persistence models: ORM entities."""

from entity_cache.infrastructure.persistence.models.user import (
    Organization,
    User,
    organization_user,
)

__all__ = ["Organization", "User", "organization_user"]

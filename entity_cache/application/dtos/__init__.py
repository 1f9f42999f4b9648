"""Application DTOs."""

from entity_cache.application.dtos.user import UserResult

__all__ = ["UserResult"]

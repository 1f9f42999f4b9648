"""Domain entities."""

from entity_cache.domain.entities.record import Record, record_relation

__all__ = ["Record", "record_relation"]

"""Domain value objects: key templates and their placeholders."""

from entity_cache.domain.value_objects.key_template import (
    KeyTemplate,
    RelationPlaceholder,
    ScalarPlaceholder,
)

__all__ = ["KeyTemplate", "RelationPlaceholder", "ScalarPlaceholder"]

"""Shared utilities: slugs and inflection."""

from entity_cache.shared.utils.inflection import Pluralizer, snake_case
from entity_cache.shared.utils.slug import slugify

__all__ = ["Pluralizer", "slugify", "snake_case"]

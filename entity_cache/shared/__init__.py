"""Shared utilities: telemetry and string helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from entity_cache.shared.telemetry import get_logger, setup_logging
from entity_cache.shared.utils import Pluralizer, slugify, snake_case

__all__ = [
    "get_logger",
    "setup_logging",
    "Pluralizer",
    "slugify",
    "snake_case",
]

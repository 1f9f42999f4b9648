"""Application services: TTL, prefixes, template expansion and the cache facade."""

from entity_cache.application.services.cache_facade import CacheFacade
from entity_cache.application.services.entity_registry import (
    EntityDescriptor,
    EntityRegistry,
    RegisteredEntityType,
)
from entity_cache.application.services.key_prefix_resolver import (
    KeyPrefixResolver,
    prefix_key,
)
from entity_cache.application.services.template_engine import TemplateEngine
from entity_cache.application.services.ttl_manager import TtlManager

__all__ = [
    "CacheFacade",
    "EntityDescriptor",
    "EntityRegistry",
    "KeyPrefixResolver",
    "RegisteredEntityType",
    "TemplateEngine",
    "TtlManager",
    "prefix_key",
]

"""Capability registry: entity type -> templates, prefix, lookups and relations.

Capabilities are declared once at registration instead of being probed at
call time. Templates are parsed at registration, so a malformed template
fails fast.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from entity_cache.application.interfaces.entities import (
    EntityLookup,
    RelationAccessor,
)
from entity_cache.application.services.key_prefix_resolver import KeyPrefixResolver
from entity_cache.domain.exceptions import (
    EntityTypeAlreadyRegisteredException,
    EntityTypeNotRegisteredException,
)
from entity_cache.domain.value_objects.key_template import KeyTemplate
from entity_cache.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from entity_cache.application.interfaces.cache import CacheProtocol
    from entity_cache.application.services.cache_facade import CacheFacade
    from entity_cache.core.config import Settings

logger = get_logger(__name__)

DEFAULT_TEMPLATES: tuple[str, ...] = ("{{id}}", "{{id}}.data")


@dataclass(frozen=True)
class EntityDescriptor:
    """Declared caching capabilities of one entity type.

    Attributes:
        name: Type name, e.g. "user" or "UserRepository"; used to derive the
            prefix when none is given.
        templates: Key templates, in order.
        prefix: Explicit prefix (skips derivation).
        find_by_id: Async id lookup used by bust_cache.
        find_by_slug: Async slug lookup used by bust_cache.
        relations: Relation name -> accessor for relation placeholders.
    """

    name: str
    templates: tuple[str, ...] = DEFAULT_TEMPLATES
    prefix: str | None = None
    find_by_id: EntityLookup | None = None
    find_by_slug: EntityLookup | None = None
    relations: Mapping[str, RelationAccessor] = field(default_factory=dict)

    @property
    def supports_id_lookup(self) -> bool:
        return self.find_by_id is not None

    @property
    def supports_slug_lookup(self) -> bool:
        return self.find_by_slug is not None


@dataclass(frozen=True)
class RegisteredEntityType:
    """A validated descriptor: parsed templates and resolved prefix."""

    descriptor: EntityDescriptor
    templates: tuple[KeyTemplate, ...]
    prefix: str

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def relations(self) -> Mapping[str, RelationAccessor]:
        return MappingProxyType(dict(self.descriptor.relations))

    @classmethod
    def from_descriptor(
        cls,
        descriptor: EntityDescriptor,
        resolver: KeyPrefixResolver | None = None,
    ) -> RegisteredEntityType:
        """Parse templates and resolve the prefix.

        Raises:
            MalformedTemplateException: If any template is malformed.
        """
        templates = tuple(KeyTemplate.parse(t) for t in descriptor.templates)
        for template in templates:
            relation = template.relation
            if relation is not None and relation.relation not in descriptor.relations:
                logger.warning(
                    "Template %r of %s references undeclared relation %r; it will expand to no keys",
                    template.text,
                    descriptor.name,
                    relation.relation,
                )
        prefix = descriptor.prefix or (resolver or KeyPrefixResolver()).prefix_for(
            descriptor.name
        )
        return cls(descriptor=descriptor, templates=templates, prefix=prefix)


class EntityRegistry:
    """Registry of entity types keyed by descriptor name."""

    def __init__(self, resolver: KeyPrefixResolver | None = None) -> None:
        self.resolver = resolver or KeyPrefixResolver()
        self._types: dict[str, RegisteredEntityType] = {}

    def register(self, descriptor: EntityDescriptor) -> RegisteredEntityType:
        """Validate and register descriptor.

        Raises:
            EntityTypeAlreadyRegisteredException: If the name is taken.
            MalformedTemplateException: If any template is malformed.
        """
        if descriptor.name in self._types:
            raise EntityTypeAlreadyRegisteredException(descriptor.name)
        registered = RegisteredEntityType.from_descriptor(descriptor, self.resolver)
        self._types[descriptor.name] = registered
        logger.debug(
            "Registered entity type %s (prefix=%s, %d templates)",
            descriptor.name,
            registered.prefix,
            len(registered.templates),
        )
        return registered

    def get(self, name: str) -> RegisteredEntityType:
        """Return the registered type.

        Raises:
            EntityTypeNotRegisteredException: If name was never registered.
        """
        try:
            return self._types[name]
        except KeyError:
            raise EntityTypeNotRegisteredException(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def facade_for(
        self,
        name: str,
        store: CacheProtocol,
        *,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> CacheFacade:
        """Build a CacheFacade for a registered entity type."""
        from entity_cache.application.services.cache_facade import CacheFacade

        return CacheFacade(
            self.get(name),
            store,
            resolver=self.resolver,
            settings=settings,
            logger=logger,
        )

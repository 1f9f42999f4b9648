"""Placeholder template engine: entity + key templates -> concrete cache keys.

Expansion rules:

- {{field}} is replaced by slugify(entity.get(field)). If the field is
  absent (None) or its slug is empty, the template is excluded from the
  result; a literal {{field}} token never leaks into a key.
- {{rel:relation.field}} collects the distinct slugs of field across
  the related entities, read in batches through the relation accessor.
  A template produces one key per distinct slug and zero keys when the
  relation is empty or has no accessor. A failing accessor is logged and
  contributes only the slugs read before it failed.
- Every key is prefixed with prefix_key(prefix, key).
"""

from collections.abc import Iterable, Mapping

from entity_cache.application.interfaces.entities import (
    EntityProtocol,
    RelationAccessor,
)
from entity_cache.application.services.key_prefix_resolver import prefix_key
from entity_cache.core.constants import DEFAULT_RELATION_BATCH_SIZE
from entity_cache.domain.value_objects.key_template import (
    KeyTemplate,
    RelationPlaceholder,
)
from entity_cache.shared.telemetry.logging import get_logger
from entity_cache.shared.utils.slug import slugify

logger = get_logger(__name__)


class TemplateEngine:
    """Expands parsed KeyTemplates against an entity. Stateless between calls."""

    def __init__(self, batch_size: int = DEFAULT_RELATION_BATCH_SIZE) -> None:
        """Initialize with the relation batch size.

        Args:
            batch_size: Related entities fetched per batch (must be positive).
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got: {batch_size}")
        self.batch_size = batch_size

    async def expand(
        self,
        entity: EntityProtocol,
        templates: Iterable[KeyTemplate | str],
        *,
        prefix: str,
        relations: Mapping[str, RelationAccessor] | None = None,
    ) -> set[str]:
        """Return every concrete, prefixed key the templates yield for entity.

        Args:
            entity: Entity whose fields fill scalar placeholders.
            templates: Parsed templates (raw strings are parsed on the fly and
                may raise MalformedTemplateException).
            prefix: Namespace prefix for every key.
            relations: Relation name -> accessor for relation placeholders.

        Returns:
            Set of resolved keys with no placeholders left.
        """
        relations = relations or {}
        # Slugs per relation placeholder, shared by templates in this call.
        collected: dict[str, set[str]] = {}
        keys: set[str] = set()

        for template in templates:
            if isinstance(template, str):
                template = KeyTemplate.parse(template)
            key = self._substitute_scalars(entity, template)
            if key is None:
                continue
            placeholder = template.relation
            if placeholder is None:
                keys.add(prefix_key(prefix, key))
                continue
            if placeholder.token not in collected:
                collected[placeholder.token] = await self._collect_relation_slugs(
                    entity, placeholder, relations.get(placeholder.relation)
                )
            for slug in collected[placeholder.token]:
                keys.add(prefix_key(prefix, key.replace(placeholder.token, slug)))

        return keys

    def _substitute_scalars(
        self, entity: EntityProtocol, template: KeyTemplate
    ) -> str | None:
        """Fill scalar placeholders; None when any field is absent or slugs to ""."""
        key = template.text
        for placeholder in template.scalars:
            slug = slugify(entity.get(placeholder.field))
            if not slug:
                logger.debug(
                    "Skipping cache key template %r: field %r not set",
                    template.text,
                    placeholder.field,
                )
                return None
            key = key.replace(placeholder.token, slug)
        return key

    async def _collect_relation_slugs(
        self,
        entity: EntityProtocol,
        placeholder: RelationPlaceholder,
        accessor: RelationAccessor | None,
    ) -> set[str]:
        """Distinct non-empty slugs of placeholder.field across the relation.

        A failing accessor is logged and ends collection; slugs read before
        the failure are kept so their keys are still evicted.
        """
        slugs: set[str] = set()
        if accessor is None:
            logger.debug(
                "No accessor for relation %r; %s expands to nothing",
                placeholder.relation,
                placeholder.token,
            )
            return slugs
        try:
            async for batch in accessor(entity, self.batch_size):
                for related in batch:
                    slug = slugify(related.get(placeholder.field))
                    if slug:
                        slugs.add(slug)
        except Exception:
            logger.exception(
                "Relation %r accessor failed; %s expands to %d keys",
                placeholder.relation,
                placeholder.token,
                len(slugs),
            )
        return slugs

"""Key template value objects: placeholders and parsed templates.

Grammar (fixed):

    placeholder := "{{" body "}}"
    body        := "rel:" NAME "." NAME    (relation placeholder)
                 | NAME                     (scalar placeholder)
    NAME        := [A-Za-z0-9_]+

Anything else between double braces is left as literal text. A template
may reference at most one distinct relation placeholder; nested or
multi-relation expansion is not supported.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from entity_cache.core.constants import RELATION_MARKER
from entity_cache.domain.exceptions import MalformedTemplateException


@dataclass(frozen=True)
class ScalarPlaceholder:
    """{{field}}: replaced by the slug of the entity's field value."""

    token: str
    field: str


@dataclass(frozen=True)
class RelationPlaceholder:
    """{{rel:relation.field}}: one key per distinct related field value."""

    token: str
    relation: str
    field: str


@dataclass(frozen=True)
class KeyTemplate:
    """A parsed, immutable cache key template.

    Build with KeyTemplate.parse(); the constructor does not validate.
    """

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"\{\{(?:" + re.escape(RELATION_MARKER) + r"(\w+)\.(\w+)|(\w+))\}\}"
    )

    text: str
    scalars: tuple[ScalarPlaceholder, ...] = ()
    relation: RelationPlaceholder | None = None

    @classmethod
    def parse(cls, text: str) -> "KeyTemplate":
        """Parse template text into placeholders.

        Args:
            text: Raw template, e.g. "{{id}}.organizations.{{rel:organizations.id}}".

        Returns:
            Parsed KeyTemplate.

        Raises:
            MalformedTemplateException: If text is empty or holds more than one
                distinct relation placeholder.
        """
        if not text:
            raise MalformedTemplateException(text, "template must be a non-empty string")
        scalars: dict[str, ScalarPlaceholder] = {}
        relations: dict[str, RelationPlaceholder] = {}
        for match in cls.PATTERN.finditer(text):
            token = match.group(0)
            rel_name, rel_field, scalar = match.groups()
            if scalar is not None:
                scalars.setdefault(token, ScalarPlaceholder(token=token, field=scalar))
            else:
                relations.setdefault(
                    token,
                    RelationPlaceholder(token=token, relation=rel_name, field=rel_field),
                )
        if len(relations) > 1:
            raise MalformedTemplateException(
                text,
                "only one relation placeholder per template is supported, found "
                + ", ".join(sorted(relations)),
            )
        return cls(
            text=text,
            scalars=tuple(scalars.values()),
            relation=next(iter(relations.values()), None),
        )

    @property
    def is_relational(self) -> bool:
        return self.relation is not None

    def __str__(self) -> str:
        return self.text

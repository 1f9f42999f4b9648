"""Domain exceptions for entity-cache.

Only template authoring and registry misuse raise. Runtime cache
failures (missing fields, missing relations, unresolved resources,
store errors) degrade to a cache miss or a skipped eviction and are
logged instead.
"""

from typing import Any


class EntityCacheException(Exception):
    """Base exception for all entity-cache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. template, entity_type).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class MalformedTemplateException(EntityCacheException):
    """Raised when a key template cannot be expanded (e.g. two relation placeholders)."""

    def __init__(self, template: str, reason: str) -> None:
        """Initialize with the offending template and the reason.

        Args:
            template: Raw template text as declared.
            reason: Why the template was rejected.
        """
        super().__init__(
            f"Malformed cache key template {template!r}: {reason}",
            "MALFORMED_TEMPLATE",
            {"template": template, "reason": reason},
        )


class EntityTypeNotRegisteredException(EntityCacheException):
    """Raised when looking up an entity type that was never registered."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(
            f"Entity type not registered: {entity_type}",
            "ENTITY_TYPE_NOT_REGISTERED",
            {"entity_type": entity_type},
        )


class EntityTypeAlreadyRegisteredException(EntityCacheException):
    """Raised when registering an entity type name twice."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(
            f"Entity type already registered: {entity_type}",
            "ENTITY_TYPE_ALREADY_REGISTERED",
            {"entity_type": entity_type},
        )

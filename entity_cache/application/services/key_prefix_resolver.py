"""Key prefix resolver: namespace per entity type and idempotent key prefixing."""

from collections.abc import Mapping

from entity_cache.application.interfaces.entities import StorageAwareEntity
from entity_cache.core.constants import CACHE_KEY_SEP, REPOSITORY_SUFFIX
from entity_cache.shared.utils.inflection import Pluralizer, snake_case


def prefix_key(prefix: str, key: str) -> str:
    """Prepend prefix + "." unless key already starts with that prefix.

    Idempotent: prefix_key(p, prefix_key(p, k)) == prefix_key(p, k).
    An empty prefix leaves the key unchanged.
    """
    key = str(key)
    if not prefix or key == prefix or key.startswith(prefix + CACHE_KEY_SEP):
        return key
    return f"{prefix}{CACHE_KEY_SEP}{key}"


class KeyPrefixResolver:
    """Derives a stable key prefix (namespace) for an entity type.

    Storage-aware entities use their storage name verbatim. Type names are
    transformed: "UserRepository" -> "user" -> "users". Irregular plurals
    need an explicit exception (person -> people).
    """

    def __init__(self, exceptions: Mapping[str, str] | None = None) -> None:
        """Initialize with optional singular -> plural overrides.

        Args:
            exceptions: e.g. {"person": "people"}; keys are snake_case singulars.
        """
        self._pluralizer = Pluralizer()
        self._exceptions: dict[str, str] = dict(exceptions or {})

    def register_exception(self, singular: str, plural: str) -> None:
        """Register an explicit plural for a type name the rules get wrong."""
        self._exceptions[snake_case(singular)] = plural

    def prefix_for(self, subject: StorageAwareEntity | str) -> str:
        """Return the prefix for a storage-aware entity or a type name.

        Args:
            subject: Entity exposing storage_name(), or a type/repository name
                such as "UserRepository", "UserRole" or "user".

        Returns:
            Prefix such as "users" or "user_roles".
        """
        if isinstance(subject, StorageAwareEntity):
            return subject.storage_name()
        name = str(subject)
        if name.endswith(REPOSITORY_SUFFIX) and name != REPOSITORY_SUFFIX:
            name = name[: -len(REPOSITORY_SUFFIX)]
        singular = snake_case(name)
        if singular in self._exceptions:
            return self._exceptions[singular]
        return self._pluralizer.pluralize(singular)

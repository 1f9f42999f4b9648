"""In-memory entity record: fields plus named relations.

Useful for entities that are not ORM-backed (API payloads, documents)
and in tests. Relations are exposed to the key engine through
record_relation().
"""

from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Record:
    """Entity with an id, scalar fields and related records."""

    id: Any
    fields: Mapping[str, Any] = field(default_factory=dict)
    relations: Mapping[str, Sequence["Record"]] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        """Return a field value; "id" resolves to the record id."""
        if name == "id":
            return self.id
        return self.fields.get(name)


def record_relation(
    name: str,
) -> Callable[["Record", int], AsyncIterator[Sequence["Record"]]]:
    """Accessor that yields record.relations[name] in batches."""

    async def accessor(entity: Record, batch_size: int) -> AsyncIterator[Sequence[Record]]:
        related = entity.relations.get(name, ())
        for start in range(0, len(related), batch_size):
            yield related[start : start + batch_size]

    return accessor

"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of find, create, update, ...)."""

    id: int
    name: str
    email: str
    is_active: bool

"""Repository interfaces (ports) for entity-specific cached repositories.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from entity_cache.application.dtos.user import UserResult


class IUserRepository(Protocol):
    """Protocol for the cached user repository (DIP)."""

    async def find(self, user_id: int, cache: bool = True) -> UserResult | None:
        """Return user by id, read-through cached under {{id}}."""

    async def create_user(self, data: dict[str, Any]) -> UserResult:
        """Create a user and immediately cache it."""

    async def update_user(self, user: UserResult | int, data: dict[str, Any]) -> UserResult | None:
        """Update a user (object or id), bust its keys and re-cache it."""

    async def get_data(self, user: UserResult | int, cache: bool = True) -> dict[str, Any] | None:
        """Return the user's response payload, cached under {{id}}.data."""

    async def find_by_email(self, email: str, cache: bool = True) -> UserResult | None:
        """Return user by email, cached under email.{{email}}."""

    async def is_member(
        self, user_id: int, organization_id: int, cache: bool = True
    ) -> bool:
        """Return whether the user belongs to the organization (cached per organization)."""

    async def join_organization(self, user_id: int, organization_id: int) -> None:
        """Add a membership and bust the user's keys."""

    async def leave_organization(self, user_id: int, organization_id: int) -> None:
        """Remove a membership and bust the user's keys."""

"""User repository with read-through caching. Interface methods return application DTOs.

Cache keys (prefix "users", derived from the repository name):

    users.{id}                          find()
    users.{id}.data                     get_data()
    users.email.{slug(email)}           find_by_email()
    users.{id}.organizations.{org_id}   is_member(), one key per organization

Cached values are plain dicts so any CacheProtocol store (including
JSON-serializing Redis) can hold them.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from entity_cache.application.dtos.user import UserResult
from entity_cache.application.interfaces.cache import CacheProtocol
from entity_cache.application.services.cache_facade import CacheFacade
from entity_cache.application.services.entity_registry import EntityDescriptor
from entity_cache.core.config import Settings
from entity_cache.infrastructure.persistence.entities import (
    SqlAlchemyEntity,
    relation_accessor,
)
from entity_cache.infrastructure.persistence.models.user import User, organization_user
from entity_cache.infrastructure.persistence.repositories.base import BaseRepository

USER_CACHE_KEYS: tuple[str, ...] = (
    "{{id}}",
    "{{id}}.data",
    "email.{{email}}",
    "{{id}}.organizations.{{rel:organizations.id}}",
)

_WRITABLE_FIELDS = ("name", "email", "is_active")


def _user_to_dict(u: User) -> dict[str, Any]:
    return {"id": u.id, "name": u.name, "email": u.email, "is_active": u.is_active}


def _user_from_dict(data: dict[str, Any] | None) -> UserResult | None:
    return UserResult(**data) if data else None


def _coerce_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class UserRepository(BaseRepository[User]):
    """User repository. find, create_user, update_user, get_data, find_by_email, memberships.

    Pass cache_service=None to disable caching entirely.
    """

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        cache = None
        if cache_service is not None:
            descriptor = EntityDescriptor(
                name=type(self).__name__,
                templates=USER_CACHE_KEYS,
                find_by_id=self._find_entity,
                relations={"organizations": relation_accessor(db, User.organizations)},
            )
            cache = CacheFacade(descriptor, cache_service, settings=settings)
        super().__init__(db, User, cache)

    async def _find_entity(self, user_id: Any) -> SqlAlchemyEntity | None:
        """Uncached id lookup used by bust_cache(id)."""
        pk = _coerce_id(user_id)
        if pk is None:
            return None
        user = await self.get_by_id(pk)
        return SqlAlchemyEntity(user) if user else None

    async def _load(self, user: UserResult | User | int) -> User | None:
        if isinstance(user, User):
            return user
        pk = user.id if isinstance(user, UserResult) else _coerce_id(user)
        return await self.get_by_id(pk) if pk is not None else None

    async def find(self, user_id: int, cache: bool = True) -> UserResult | None:
        """Find a user by id."""
        if cache and self.cache:
            data = await self.cache.remember(user_id, lambda: self._find_dict(user_id))
            return _user_from_dict(data)
        return _user_from_dict(await self._find_dict(user_id))

    async def _find_dict(self, user_id: Any) -> dict[str, Any] | None:
        pk = _coerce_id(user_id)
        user = await self.get_by_id(pk) if pk is not None else None
        return _user_to_dict(user) if user else None

    async def create_user(self, data: dict[str, Any]) -> UserResult:
        """Create a new user and immediately cache it."""
        created = await self.create(User(**self._format_data(data)))
        return await self.find(created.id) or UserResult(**_user_to_dict(created))

    async def update_user(
        self, user: UserResult | User | int, data: dict[str, Any]
    ) -> UserResult | None:
        """Update a user (DTO, ORM instance or id), bust its cache and re-cache it.

        Keys derived from the pre-update state (e.g. the old email key) are
        evicted too.
        """
        obj = await self._load(user)
        if obj is None:
            return None
        stale_keys = await self.cache.keys_for(SqlAlchemyEntity(obj)) if self.cache else set()
        for name, value in self._format_data(data).items():
            setattr(obj, name, value)
        obj = await self.update(obj)
        if self.cache:
            for key in stale_keys:
                await self.cache.forget(key)
        return await self.find(obj.id)

    async def get_data(
        self, user: UserResult | User | int, cache: bool = True
    ) -> dict[str, Any] | None:
        """Get the response payload for a user (extra data for API responses)."""
        user_id = user.id if isinstance(user, (UserResult, User)) else _coerce_id(user)
        if user_id is None:
            return None
        if cache and self.cache:
            return await self.cache.remember(
                f"{user_id}.data", lambda: self.get_data(user_id, cache=False)
            )
        obj = await self._load(user_id)
        if obj is None:
            return None
        data = _user_to_dict(obj)
        data["organization_ids"] = await self._organization_ids(obj.id)
        return data

    async def find_by_email(self, email: str, cache: bool = True) -> UserResult | None:
        """Find a user by email address."""
        if cache and self.cache:
            data = await self.cache.remember(
                "email." + self.cache.slug(email),
                lambda: self._find_by_email_dict(email),
            )
            return _user_from_dict(data)
        return _user_from_dict(await self._find_by_email_dict(email))

    async def _find_by_email_dict(self, email: str) -> dict[str, Any] | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        user = result.scalar_one_or_none()
        return _user_to_dict(user) if user else None

    async def is_member(
        self, user_id: int, organization_id: int, cache: bool = True
    ) -> bool:
        """Return whether the user belongs to the organization."""
        if cache and self.cache:
            key = f"{user_id}.organizations.{self.cache.slug(organization_id)}"
            return await self.cache.remember(
                key, lambda: self.is_member(user_id, organization_id, cache=False)
            )
        result = await self.db.execute(
            select(organization_user.c.user_id).where(
                organization_user.c.user_id == user_id,
                organization_user.c.organization_id == organization_id,
            )
        )
        return result.first() is not None

    async def join_organization(self, user_id: int, organization_id: int) -> None:
        """Add a membership and bust the user's keys."""
        await self.db.execute(
            insert(organization_user).values(
                user_id=user_id, organization_id=organization_id
            )
        )
        await self._after_membership_change(user_id, organization_id)

    async def leave_organization(self, user_id: int, organization_id: int) -> None:
        """Remove a membership and bust the user's keys, including the removed one."""
        await self.db.execute(
            delete(organization_user).where(
                organization_user.c.user_id == user_id,
                organization_user.c.organization_id == organization_id,
            )
        )
        await self._after_membership_change(user_id, organization_id)

    async def _after_membership_change(self, user_id: int, organization_id: int) -> None:
        if self.cache is None:
            return
        await self.db.flush()
        # The key for a removed membership is no longer derivable from the relation.
        await self.cache.forget(f"{user_id}.organizations.{self.cache.slug(organization_id)}")
        await self.cache.bust_cache(user_id)

    async def _organization_ids(self, user_id: int) -> list[int]:
        result = await self.db.execute(
            select(organization_user.c.organization_id)
            .where(organization_user.c.user_id == user_id)
            .order_by(organization_user.c.organization_id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _format_data(data: dict[str, Any]) -> dict[str, Any]:
        """Keep writable fields only; trim and lowercase email."""
        out = {k: v for k, v in data.items() if k in _WRITABLE_FIELDS}
        if isinstance(out.get("email"), str):
            out["email"] = out["email"].strip().lower()
        return out

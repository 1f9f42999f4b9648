"""Persistence: declarative Base and async session factory for the SQLAlchemy adapter.

The engine is created on demand from settings.database_url; importing this
module does not touch the database.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from entity_cache.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def create_session_factory(
    settings: Settings | None = None,
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create an async engine and session factory.

    Args:
        settings: Optional Settings (database_url, database_echo).
        database_url: Overrides settings.database_url (e.g. sqlite+aiosqlite://).

    Returns:
        Session factory with expire_on_commit disabled, so cached entities stay
        readable after commit.

    Raises:
        ValueError: If no database URL is configured.
    """
    settings = settings or get_settings()
    url = database_url or settings.database_url
    if not url:
        raise ValueError(
            "DATABASE_URL is required for the SQLAlchemy entity store. "
            "Set in environment or .env file."
        )
    engine = create_async_engine(url, echo=settings.database_echo, pool_pre_ping=True)
    logger.debug("SQLAlchemy engine created for %s", engine.url.render_as_string(hide_password=True))
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

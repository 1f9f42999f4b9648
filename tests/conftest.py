"""Pytest configuration and fixtures for entity-cache.

Unit tests use the in-process MemoryCacheStore and Record entities.
Repository tests use SQLite through aiosqlite on a per-test file.
"""

import pytest

from entity_cache.core.config import Settings
from entity_cache.infrastructure.cache.memory_cache import MemoryCacheStore


@pytest.fixture
def settings() -> Settings:
    """Settings with a 60 minute default TTL, a 120 minute ceiling and debug on."""
    return Settings(_env_file=None, cache_ttl=60, cache_ttl_max=120, debug=True)


@pytest.fixture
def store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
async def db_session(settings: Settings, tmp_path):
    """Async session on a fresh SQLite file with all tables created."""
    from entity_cache.infrastructure.persistence import models  # noqa: F401
    from entity_cache.infrastructure.persistence.database import (
        Base,
        create_session_factory,
    )

    factory = create_session_factory(
        settings, database_url=f"sqlite+aiosqlite:///{tmp_path / 'entity_cache.db'}"
    )
    engine = factory.kw["bind"]
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with factory() as session:
        yield session
    await engine.dispose()

"""Library configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cache TTL bounds are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    cache_ttl and cache_ttl_max are in minutes (CACHE_TTL, CACHE_TTL_MAX).
    cache_ttl_max is read once per CacheFacade / TtlManager construction.
    """

    debug: bool = False

    # Cache TTL (minutes)
    cache_ttl: int = 60
    cache_ttl_max: int = 1440
    # Related entities are read in batches of this size during key expansion.
    cache_relation_batch_size: int = 10

    # Redis cache store
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Entity store (SQLAlchemy adapter)
    database_url: str = ""
    database_echo: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache_bounds(self) -> "Settings":
        """Validate the TTL ceiling and relation batch size.

        cache_ttl itself is not validated here: TtlManager clamps it to
        cache_ttl_max and coerces invalid values to its default.
        """
        if self.cache_ttl_max <= 0:
            raise ValueError(
                f"CACHE_TTL_MAX must be a positive number of minutes, got: {self.cache_ttl_max}"
            )
        if self.cache_relation_batch_size <= 0:
            raise ValueError(
                "CACHE_RELATION_BATCH_SIZE must be positive, "
                f"got: {self.cache_relation_batch_size}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

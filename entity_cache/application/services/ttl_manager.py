"""TTL manager: default and per-call cache TTLs, clamped to a ceiling."""

from typing import Any

from entity_cache.core.config import Settings, get_settings
from entity_cache.core.constants import DEFAULT_TTL_MINUTES
from entity_cache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _coerce_minutes(value: Any) -> int | None:
    """Return value as a positive int, or None when it is not usable as a TTL."""
    if value is None or isinstance(value, bool):
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return None
    return minutes if minutes > 0 else None


class TtlManager:
    """Holds a default TTL (minutes) and clamps every TTL to ttl_max.

    Invariant: 0 < ttl <= ttl_max. ttl_max is read once at construction.
    Invalid input (non-numeric, None, bool, <= 0) falls back to the default
    instead of raising.
    """

    def __init__(
        self,
        ttl: Any = None,
        ttl_max: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize from explicit values or settings (cache_ttl, cache_ttl_max).

        Args:
            ttl: Default TTL in minutes; defaults to settings.cache_ttl.
            ttl_max: Ceiling in minutes; defaults to settings.cache_ttl_max.
            settings: Optional Settings for testing or DI.
        """
        if ttl is None or ttl_max is None:
            settings = settings or get_settings()
            ttl = settings.cache_ttl if ttl is None else ttl
            ttl_max = settings.cache_ttl_max if ttl_max is None else ttl_max
        self._ttl_max = _coerce_minutes(ttl_max) or DEFAULT_TTL_MINUTES
        self._default = min(
            _coerce_minutes(ttl) or DEFAULT_TTL_MINUTES, self._ttl_max
        )
        self._ttl = self._default

    @property
    def ttl_max(self) -> int:
        return self._ttl_max

    @property
    def ttl(self) -> int:
        return self._ttl

    def set_ttl(self, value: Any = DEFAULT_TTL_MINUTES) -> int:
        """Store min(value, ttl_max) as the default TTL and return it."""
        minutes = _coerce_minutes(value)
        if minutes is None:
            logger.debug("Invalid TTL %r, using default %s", value, self._default)
            minutes = self._default
        self._ttl = min(minutes, self._ttl_max)
        return self._ttl

    def effective_ttl(self, override: Any = None) -> int:
        """Return the stored TTL, or override clamped to ttl_max.

        A one-off override never changes the stored default. An unusable
        override (None, 0, non-numeric) yields the stored TTL.
        """
        minutes = _coerce_minutes(override)
        if minutes is None:
            return self._ttl
        return min(minutes, self._ttl_max)

    def ttl_seconds(self, override: Any = None) -> int:
        """effective_ttl() converted to seconds for cache stores."""
        return self.effective_ttl(override) * 60

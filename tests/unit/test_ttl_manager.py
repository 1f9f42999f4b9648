"""TtlManager: clamping, coercion and one-off overrides."""

import pytest

from entity_cache.application.services.ttl_manager import TtlManager
from entity_cache.core.config import Settings


def test_default_ttl_from_settings(settings: Settings) -> None:
    ttl = TtlManager(settings=settings)
    assert ttl.ttl == 60
    assert ttl.ttl_max == 120


def test_default_ttl_is_clamped_to_max() -> None:
    ttl = TtlManager(ttl=500, ttl_max=120)
    assert ttl.ttl == 120


def test_set_ttl_stores_min_of_value_and_max() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    assert ttl.set_ttl(30) == 30
    assert ttl.ttl == 30
    assert ttl.set_ttl(1000) == 120
    assert ttl.ttl == 120


def test_set_ttl_coerces_numeric_strings() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    assert ttl.set_ttl("45") == 45


@pytest.mark.parametrize("value", ["abc", None, 0, -5, True, object()])
def test_set_ttl_invalid_input_falls_back_to_default(value: object) -> None:
    """Invalid TTLs never raise; the configured default is used instead."""
    ttl = TtlManager(ttl=60, ttl_max=120)
    ttl.set_ttl(10)
    assert ttl.set_ttl(value) == 60


def test_invalid_configured_default_uses_builtin_default() -> None:
    assert TtlManager(ttl="soon", ttl_max=120).ttl == 60
    assert TtlManager(ttl="soon", ttl_max=30).ttl == 30


def test_effective_ttl_is_min_of_override_and_max_and_monotonic() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    previous = 0
    for t in range(1, 300):
        effective = ttl.effective_ttl(t)
        assert effective == min(t, 120)
        assert effective >= previous
        previous = effective


def test_effective_ttl_override_does_not_change_default() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    assert ttl.effective_ttl(90) == 90
    assert ttl.effective_ttl() == 60
    assert ttl.ttl == 60


def test_effective_ttl_unusable_override_returns_stored() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    assert ttl.effective_ttl(0) == 60
    assert ttl.effective_ttl("n/a") == 60


def test_ttl_seconds_converts_minutes() -> None:
    ttl = TtlManager(ttl=60, ttl_max=120)
    assert ttl.ttl_seconds() == 3600
    assert ttl.ttl_seconds(500) == 7200

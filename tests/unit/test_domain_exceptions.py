"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from entity_cache.domain.exceptions import (
    EntityCacheException,
    EntityTypeAlreadyRegisteredException,
    EntityTypeNotRegisteredException,
    MalformedTemplateException,
)


def test_entity_cache_exception_default_error_code() -> None:
    """Base EntityCacheException uses class name as error_code when not provided."""
    exc = EntityCacheException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "EntityCacheException"
    assert exc.details == {}


def test_entity_cache_exception_custom_error_code_and_details() -> None:
    exc = EntityCacheException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}
    assert str(exc) == "Oops"


def test_malformed_template_exception() -> None:
    exc = MalformedTemplateException("{{rel:a.x}}.{{rel:b.y}}", "two relations")
    assert exc.error_code == "MALFORMED_TEMPLATE"
    assert exc.details == {"template": "{{rel:a.x}}.{{rel:b.y}}", "reason": "two relations"}
    assert "two relations" in exc.message


def test_entity_type_not_registered_exception() -> None:
    exc = EntityTypeNotRegisteredException("UserRepository")
    assert exc.error_code == "ENTITY_TYPE_NOT_REGISTERED"
    assert exc.details == {"entity_type": "UserRepository"}
    assert "UserRepository" in exc.message


def test_entity_type_already_registered_exception() -> None:
    exc = EntityTypeAlreadyRegisteredException("UserRepository")
    assert exc.error_code == "ENTITY_TYPE_ALREADY_REGISTERED"
    assert exc.details == {"entity_type": "UserRepository"}


@pytest.mark.parametrize(
    "exc",
    [
        MalformedTemplateException("t", "r"),
        EntityTypeNotRegisteredException("x"),
        EntityTypeAlreadyRegisteredException("x"),
    ],
)
def test_all_subclass_base(exc: EntityCacheException) -> None:
    assert isinstance(exc, EntityCacheException)

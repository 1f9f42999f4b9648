"""KeyTemplate parsing."""

import pytest

from entity_cache.domain.exceptions import MalformedTemplateException
from entity_cache.domain.value_objects.key_template import (
    KeyTemplate,
    RelationPlaceholder,
    ScalarPlaceholder,
)


def test_parse_scalar_template() -> None:
    template = KeyTemplate.parse("{{id}}.data")
    assert template.scalars == (ScalarPlaceholder(token="{{id}}", field="id"),)
    assert template.relation is None
    assert not template.is_relational
    assert str(template) == "{{id}}.data"


def test_parse_relation_template() -> None:
    template = KeyTemplate.parse("{{id}}.organizations.{{rel:organizations.id}}")
    assert template.scalars == (ScalarPlaceholder(token="{{id}}", field="id"),)
    assert template.relation == RelationPlaceholder(
        token="{{rel:organizations.id}}", relation="organizations", field="id"
    )
    assert template.is_relational


def test_parse_literal_template_has_no_placeholders() -> None:
    template = KeyTemplate.parse("all")
    assert template.scalars == ()
    assert template.relation is None


def test_repeated_scalar_is_parsed_once() -> None:
    template = KeyTemplate.parse("{{id}}.{{id}}")
    assert len(template.scalars) == 1


def test_repeated_same_relation_is_allowed() -> None:
    template = KeyTemplate.parse("{{rel:roles.id}}.{{rel:roles.id}}")
    assert template.relation is not None
    assert template.relation.relation == "roles"


def test_two_distinct_relations_rejected() -> None:
    with pytest.raises(MalformedTemplateException) as exc_info:
        KeyTemplate.parse("{{rel:roles.id}}.{{rel:teams.id}}")
    assert exc_info.value.details["template"] == "{{rel:roles.id}}.{{rel:teams.id}}"


def test_empty_template_rejected() -> None:
    with pytest.raises(MalformedTemplateException):
        KeyTemplate.parse("")


@pytest.mark.parametrize("text", ["{{ id }}", "{{rel:orgs}}", "{id}", "{{a-b}}"])
def test_non_matching_braces_are_literal(text: str) -> None:
    template = KeyTemplate.parse(text)
    assert template.scalars == ()
    assert template.relation is None

"""TemplateEngine expansion against Record entities."""

import pytest

from entity_cache.application.services.template_engine import TemplateEngine
from entity_cache.domain.entities.record import Record, record_relation
from entity_cache.domain.exceptions import MalformedTemplateException
from entity_cache.domain.value_objects.key_template import KeyTemplate

USER_TEMPLATES = (
    "{{id}}",
    "{{id}}.data",
    "email.{{email}}",
    "{{id}}.organizations.{{rel:organizations.id}}",
)
RELATIONS = {"organizations": record_relation("organizations")}


def _user(*org_ids: int, email: str | None = "a@b.com") -> Record:
    return Record(
        id=42,
        fields={"email": email} if email is not None else {},
        relations={"organizations": [Record(id=o) for o in org_ids]},
    )


async def test_single_id_template() -> None:
    keys = await TemplateEngine().expand(Record(id=42), ["{{id}}"], prefix="users")
    assert keys == {"users.42"}


async def test_user_templates_without_relations() -> None:
    keys = await TemplateEngine().expand(
        _user(), USER_TEMPLATES, prefix="users", relations=RELATIONS
    )
    assert keys == {"users.42", "users.42.data", "users.email.a-b-com"}


async def test_relation_expands_one_key_per_distinct_value() -> None:
    keys = await TemplateEngine().expand(
        _user(5, 7, 7, 9),
        ["{{id}}.organizations.{{rel:organizations.id}}"],
        prefix="users",
        relations=RELATIONS,
    )
    assert keys == {
        "users.42.organizations.5",
        "users.42.organizations.7",
        "users.42.organizations.9",
    }


async def test_missing_field_excludes_template() -> None:
    keys = await TemplateEngine().expand(
        _user(email=None), ["{{id}}", "email.{{email}}"], prefix="users"
    )
    assert keys == {"users.42"}
    assert not any("{{" in k for k in keys)


async def test_missing_accessor_yields_no_keys_for_relation_template() -> None:
    keys = await TemplateEngine().expand(
        _user(5), ["{{id}}", "{{id}}.organizations.{{rel:organizations.id}}"], prefix="users"
    )
    assert keys == {"users.42"}


async def test_relation_values_read_in_batches() -> None:
    seen: list[int] = []
    inner = record_relation("organizations")

    async def spy(entity, batch_size):
        async for batch in inner(entity, batch_size):
            seen.append(len(batch))
            yield batch

    keys = await TemplateEngine(batch_size=2).expand(
        _user(1, 2, 3, 4, 5),
        ["{{rel:organizations.id}}"],
        prefix="users",
        relations={"organizations": spy},
    )
    assert seen == [2, 2, 1]
    assert keys == {f"users.{i}" for i in range(1, 6)}


async def test_related_values_are_slugged() -> None:
    org = Record(id=1, fields={"slug": "Acme Inc."})
    entity = Record(id=42, relations={"organizations": [org]})
    keys = await TemplateEngine().expand(
        entity,
        ["{{id}}.orgs.{{rel:organizations.slug}}"],
        prefix="users",
        relations=RELATIONS,
    )
    assert keys == {"users.42.orgs.acme-inc"}


async def test_parsed_templates_and_already_prefixed_literals() -> None:
    keys = await TemplateEngine().expand(
        Record(id=42), [KeyTemplate.parse("users.{{id}}")], prefix="users"
    )
    assert keys == {"users.42"}


async def test_malformed_raw_template_raises() -> None:
    with pytest.raises(MalformedTemplateException):
        await TemplateEngine().expand(
            Record(id=1), ["{{rel:a.id}}.{{rel:b.id}}"], prefix="x"
        )


def test_batch_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TemplateEngine(batch_size=0)


async def test_failing_accessor_keeps_slugs_read_before_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def flaky(entity, batch_size):
        yield [Record(id=5)]
        raise ConnectionError("relation store down")

    keys = await TemplateEngine(batch_size=1).expand(
        _user(),
        ["{{id}}", "{{id}}.organizations.{{rel:organizations.id}}"],
        prefix="users",
        relations={"organizations": flaky},
    )
    assert keys == {"users.42", "users.42.organizations.5"}
    assert "accessor failed" in caplog.text


async def test_empty_slug_excludes_scalar_template() -> None:
    keys = await TemplateEngine().expand(
        _user(email="@@@"), ["{{id}}", "email.{{email}}"], prefix="users"
    )
    assert keys == {"users.42"}


async def test_empty_slug_related_values_are_skipped() -> None:
    entity = Record(
        id=42,
        relations={
            "organizations": [
                Record(id=1, fields={"slug": "!!!"}),
                Record(id=2, fields={"slug": "acme"}),
            ]
        },
    )
    keys = await TemplateEngine().expand(
        entity, ["{{id}}.orgs.{{rel:organizations.slug}}"], prefix="users", relations=RELATIONS
    )
    assert keys == {"users.42.orgs.acme"}


async def test_unhashable_related_values_are_deduplicated_by_slug() -> None:
    entity = Record(
        id=42,
        relations={
            "organizations": [
                Record(id=1, fields={"tags": ["a", "b"]}),
                Record(id=2, fields={"tags": ["a", "b"]}),
                Record(id=3, fields={"tags": {"k": "v"}}),
            ]
        },
    )
    keys = await TemplateEngine().expand(
        entity, ["{{id}}.tags.{{rel:organizations.tags}}"], prefix="users", relations=RELATIONS
    )
    assert keys == {"users.42.tags.a-b", "users.42.tags.k-v"}

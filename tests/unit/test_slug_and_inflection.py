"""slugify, snake_case and Pluralizer."""

import uuid

import pytest

from entity_cache.shared.utils.inflection import Pluralizer, snake_case
from entity_cache.shared.utils.slug import slugify


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("a@b.com", "a-b-com"),
        ("Hello World", "hello-world"),
        ("  --Already-slugged--  ", "already-slugged"),
        ("Café Crème", "cafe-creme"),
        (42, "42"),
        (True, "true"),
        (None, ""),
        ("", ""),
        ("@@@", ""),
    ],
)
def test_slugify(value: object, expected: str) -> None:
    assert slugify(value) == expected


def test_slugify_uuid() -> None:
    value = uuid.UUID("12345678-1234-5678-1234-567812345678")
    assert slugify(value) == "12345678-1234-5678-1234-567812345678"


def test_slugify_custom_separator() -> None:
    assert slugify("a b", separator="_") == "a_b"


def test_slugify_is_idempotent() -> None:
    once = slugify("Mixed Case @ Value!")
    assert slugify(once) == once


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("User", "user"),
        ("UserRole", "user_role"),
        ("HTTPClient", "http_client"),
        ("user-role", "user_role"),
        ("user role", "user_role"),
        ("already_snake", "already_snake"),
    ],
)
def test_snake_case(name: str, expected: str) -> None:
    assert snake_case(name) == expected


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("user", "users"),
        ("category", "categories"),
        ("day", "days"),
        ("box", "boxes"),
        ("church", "churches"),
        ("address", "addresses"),
        ("status", "statuses"),
        ("bus", "buses"),
        ("alias", "aliases"),
        ("analysis", "analyses"),
        ("shelf", "shelves"),
        ("knife", "knives"),
        ("medium", "media"),
        ("index", "indices"),
        ("quiz", "quizzes"),
        ("hero", "heroes"),
        ("users", "users"),
        ("news", "news"),
        ("user_role", "user_roles"),
        ("user_metadata", "user_metadata"),
        ("", ""),
    ],
)
def test_pluralize(word: str, expected: str) -> None:
    assert Pluralizer().pluralize(word) == expected

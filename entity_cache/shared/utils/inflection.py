"""English inflection helpers for deriving key prefixes from type names.

Rule-based only: irregular plurals that the rules miss (person -> people)
must be registered as explicit exceptions by the caller.
"""

import re
from typing import ClassVar

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD_RE = re.compile(r"[^a-zA-Z0-9]+")


def snake_case(name: str) -> str:
    """Convert CamelCase, kebab-case or spaced names to lower snake_case.

    Examples: "UserRole" -> "user_role", "HTTPClient" -> "http_client".
    """
    spaced = _CAMEL_BOUNDARY_RE.sub("_", name)
    return _NON_WORD_RE.sub("_", spaced).strip("_").lower()


class Pluralizer:
    """Suffix-rule pluralizer for lower snake_case words.

    Only the last underscore-separated segment is pluralized
    (user_role -> user_roles).
    """

    UNCOUNTABLE: ClassVar[frozenset[str]] = frozenset(
        {"data", "equipment", "information", "metadata", "news", "series", "species"}
    )
    # (pattern, replacement) tried in order; first match wins.
    RULES: ClassVar[tuple[tuple[re.Pattern[str], str], ...]] = (
        (re.compile(r"(quiz)$"), r"\1zes"),
        (re.compile(r"(matr|vert|ind)(?:ix|ex)$"), r"\1ices"),
        (re.compile(r"(x|ch|ss|sh|zz)$"), r"\1es"),
        (re.compile(r"([^aeiouy]|qu)y$"), r"\1ies"),
        (re.compile(r"(?:([^f])fe|([lr])f)$"), r"\1\2ves"),
        (re.compile(r"sis$"), "ses"),
        (re.compile(r"([ti])um$"), r"\1a"),
        (re.compile(r"(bu)s$"), r"\1ses"),
        (re.compile(r"(alias|status)$"), r"\1es"),
        (re.compile(r"(octop)us$"), r"\1i"),
        (re.compile(r"(buffal|tomat|potat|her)o$"), r"\1oes"),
        (re.compile(r"s$"), "s"),
        (re.compile(r"$"), "s"),
    )

    def pluralize(self, word: str) -> str:
        """Return the plural of a lower snake_case word ("" stays "")."""
        if not word:
            return word
        head, sep, last = word.rpartition("_")
        if last in self.UNCOUNTABLE:
            return word
        for pattern, replacement in self.RULES:
            if pattern.search(last):
                return f"{head}{sep}{pattern.sub(replacement, last, count=1)}"
        return word

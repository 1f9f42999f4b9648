"""Slug helper for composing cache keys from arbitrary values."""

import re
import unicodedata
from typing import Any

from entity_cache.core.constants import SLUG_SEPARATOR

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: Any, separator: str = SLUG_SEPARATOR) -> str:
    """Convert any value to a lowercase, hyphenated, key-safe slug.

    Non-ASCII letters are transliterated where Unicode decomposition allows
    (e.g. "é" -> "e"); every other run of non-alphanumerics collapses to a
    single separator, trimmed at both ends.

    Args:
        value: Field value (str, int, UUID, ...). None yields "".
        separator: Replacement for unsafe runs (default "-").

    Returns:
        Slug such as "a-b-com" for "a@b.com".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_ALNUM_RE.sub(separator, ascii_text.lower()).strip(separator)

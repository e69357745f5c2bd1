from __future__ import annotations

import re
import unicodedata
from typing import Callable

from marketplace.db import settings

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Latin letters that have no decomposition into base letter + combining mark.
_TRANSLITERATIONS = {
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
    "ø": "o",
    "đ": "d",
    "ð": "d",
    "ł": "l",
    "þ": "th",
    "ı": "i",
}


def _transliterate(value: str) -> str:
    text = unicodedata.normalize("NFKD", value)
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return "".join(_TRANSLITERATIONS.get(ch, ch) for ch in text)


def normalize_slug(value: str | None, fallback: str | None = None, max_length: int | None = None) -> str:
    """Lowercase ascii slug; punctuation and whitespace runs collapse into one hyphen."""
    limit = max_length or settings.slug_max_length
    text = _transliterate((value or "").lower())
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    text = text[:limit].rstrip("-")
    return text or (fallback or settings.slug_fallback)


def is_valid_slug(value: str | None, max_length: int | None = None) -> bool:
    limit = max_length or settings.slug_max_length
    if not value or len(value) > limit:
        return False
    return SLUG_PATTERN.match(value) is not None


def generate_unique_slug(
    name: str | None,
    slug_exists: Callable[[str], bool],
    fallback: str | None = None,
    max_length: int | None = None,
) -> str:
    """
    Returns the normalized slug for ``name`` or the first free ``<slug>-N`` (N from 1).

    Uniqueness only holds at the instant of the check; writers must still rely on
    the store constraint.
    """
    limit = max_length or settings.slug_max_length
    base = normalize_slug(name, fallback=fallback, max_length=limit)
    candidate = base
    counter = 1
    while slug_exists(candidate):
        suffix = f"-{counter}"
        candidate = f"{base[: limit - len(suffix)].rstrip('-')}{suffix}"
        counter += 1
    return candidate

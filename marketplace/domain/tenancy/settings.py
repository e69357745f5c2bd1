"""
Tenant settings stored as a flat JSON object keyed by dotted names.

Only the keys in KNOWN_SETTINGS are accepted. Nested input such as
``{"theme": {"primary_color": "#fff"}}`` is flattened to ``theme.primary_color``.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Mapping
from urllib.parse import urlparse

from pydantic import EmailStr, TypeAdapter

DEFAULT_PRIMARY_COLOR = "#1976d2"
DEFAULT_SECONDARY_COLOR = "#dc004e"
COLOR_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(?:[-_][a-z0-9]{2,8})?$")
MAX_TEXT_LENGTH = 255

_email_adapter = TypeAdapter(EmailStr)


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("must not be empty")
    if len(cleaned) > MAX_TEXT_LENGTH:
        raise ValueError(f"must have at most {MAX_TEXT_LENGTH} characters")
    return cleaned


def _color(value: Any) -> str:
    cleaned = _text(value)
    if not COLOR_PATTERN.match(cleaned):
        raise ValueError("must be a hex color like #1976d2")
    return cleaned.lower()


def _email(value: Any) -> str:
    return str(_email_adapter.validate_python(_text(value)))


def _language_code(value: Any) -> str:
    cleaned = _text(value).lower()
    if not LANGUAGE_CODE_PATTERN.match(cleaned):
        raise ValueError("must be a language code like en or pt-br")
    return cleaned


def _http_url(value: Any) -> str:
    cleaned = _text(value)
    parsed = urlparse(cleaned)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) url")
    return cleaned


KNOWN_SETTINGS: dict[str, Callable[[Any], Any]] = {
    "theme.primary_color": _color,
    "theme.secondary_color": _color,
    "contact.email": _email,
    "contact.phone": _text,
    "default_language": _language_code,
    "branding.display_name": _text,
    "branding.logo_url": _http_url,
}


def flatten_settings(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_settings(value, prefix=f"{name}."))
        else:
            flat[name] = value
    return flat


def normalize_setting(key: str, value: Any) -> Any:
    normalizer = KNOWN_SETTINGS.get(key)
    if normalizer is None:
        raise ValueError(f"Unknown setting: {key}")
    try:
        return normalizer(value)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {key}: {exc}") from exc


def normalize_tenant_settings(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: normalize_setting(key, value) for key, value in flatten_settings(data).items()}


def merge_tenant_settings(current: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Updates win; a ``None`` value removes the key."""
    merged = dict(current)
    for key, value in flatten_settings(updates).items():
        if value is None:
            if key not in KNOWN_SETTINGS:
                raise ValueError(f"Unknown setting: {key}")
            merged.pop(key, None)
            continue
        merged[key] = normalize_setting(key, value)
    return merged


def load_tenant_settings(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict):
        return {}
    result: dict[str, Any] = {}
    for key, value in flatten_settings(data).items():
        try:
            result[key] = normalize_setting(key, value)
        except ValueError:
            continue
    return result


def dump_tenant_settings(values: Mapping[str, Any]) -> str | None:
    if not values:
        return None
    return json.dumps(dict(sorted(values.items())), ensure_ascii=True)


def branding_config(name: str, values: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": name,
        "display_name": values.get("branding.display_name") or name,
        "logo_url": values.get("branding.logo_url"),
        "primary_color": values.get("theme.primary_color", DEFAULT_PRIMARY_COLOR),
        "secondary_color": values.get("theme.secondary_color", DEFAULT_SECONDARY_COLOR),
    }

"""Tests for tenant settings normalization and branding defaults"""

import json

import pytest

from marketplace.domain.tenancy.settings import (
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    branding_config,
    dump_tenant_settings,
    flatten_settings,
    load_tenant_settings,
    merge_tenant_settings,
    normalize_tenant_settings,
)


class TestNormalize:
    def test_nested_input_is_flattened(self):
        values = normalize_tenant_settings({"theme": {"primary_color": "#ABCDEF"}, "default_language": "EN"})
        assert values == {"theme.primary_color": "#abcdef", "default_language": "en"}

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown setting"):
            normalize_tenant_settings({"theme.font": "Arial"})

    def test_bad_color_rejected(self):
        with pytest.raises(ValueError, match="theme.primary_color"):
            normalize_tenant_settings({"theme.primary_color": "blue"})

    def test_email_is_validated(self):
        assert normalize_tenant_settings({"contact.email": "owner@acme.com"}) == {"contact.email": "owner@acme.com"}
        with pytest.raises(ValueError):
            normalize_tenant_settings({"contact.email": "not-an-email"})

    def test_logo_must_be_http_url(self):
        with pytest.raises(ValueError):
            normalize_tenant_settings({"branding.logo_url": "ftp://acme.com/logo.png"})

    def test_flatten_leaves_flat_keys(self):
        assert flatten_settings({"a.b": 1, "c": {"d": 2}}) == {"a.b": 1, "c.d": 2}


class TestMerge:
    def test_updates_win(self):
        merged = merge_tenant_settings({"default_language": "en"}, {"default_language": "de"})
        assert merged == {"default_language": "de"}

    def test_none_removes_key(self):
        merged = merge_tenant_settings(
            {"default_language": "en", "contact.phone": "+1 555 0100"},
            {"contact": {"phone": None}},
        )
        assert merged == {"default_language": "en"}

    def test_none_for_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            merge_tenant_settings({}, {"made.up": None})


class TestLoadDump:
    def test_load_skips_garbage(self):
        raw = json.dumps({"default_language": "en", "unknown": 1, "theme.primary_color": "nope"})
        assert load_tenant_settings(raw) == {"default_language": "en"}

    def test_load_tolerates_invalid_json(self):
        assert load_tenant_settings("{not json") == {}
        assert load_tenant_settings("[1, 2]") == {}
        assert load_tenant_settings(None) == {}

    def test_dump_is_sorted(self):
        assert dump_tenant_settings({"b.x": "1", "a.y": "2"}) == '{"a.y": "2", "b.x": "1"}'
        assert dump_tenant_settings({}) is None


class TestBranding:
    def test_defaults(self):
        config = branding_config("Acme", {})
        assert config["display_name"] == "Acme"
        assert config["primary_color"] == DEFAULT_PRIMARY_COLOR == "#1976d2"
        assert config["secondary_color"] == DEFAULT_SECONDARY_COLOR == "#dc004e"
        assert config["logo_url"] is None

    def test_overrides(self):
        config = branding_config(
            "Acme",
            {"branding.display_name": "ACME Store", "theme.secondary_color": "#000000"},
        )
        assert config["display_name"] == "ACME Store"
        assert config["secondary_color"] == "#000000"

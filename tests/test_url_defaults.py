"""Tests for the single default rules within one element/language scope"""

from types import SimpleNamespace

from marketplace import models
from marketplace.domain.urls import defaults, store


def _url(db, tenant_id, slug, is_default=False, element_id="prod-1", language_id=1):
    url = models.Url(
        tenant_id=tenant_id,
        element_type="product",
        element_id=element_id,
        language_id=language_id,
        slug=slug,
        is_default=is_default,
    )
    db.add(url)
    db.commit()
    return url


def _defaults(db, tenant_id, element_id="prod-1", language_id=1):
    return [
        url.id
        for url in store.get_by_element_and_language(db, tenant_id, "product", element_id, language_id)
        if url.is_default
    ]


class TestSelectPromotionCandidate:
    def test_lowest_id_wins(self):
        urls = [SimpleNamespace(id=7), SimpleNamespace(id=3), SimpleNamespace(id=5)]
        assert defaults.select_promotion_candidate(urls).id == 3

    def test_excluded_id_is_skipped(self):
        urls = [SimpleNamespace(id=3), SimpleNamespace(id=5)]
        assert defaults.select_promotion_candidate(urls, excluded_id=3).id == 5

    def test_empty_scope_has_no_candidate(self):
        assert defaults.select_promotion_candidate([]) is None


class TestUnsetScopeDefaults:
    def test_clears_only_matching_scope(self, db, tenant, german):
        en_default = _url(db, tenant.id, "home", is_default=True)
        de_default = _url(db, tenant.id, "start", is_default=True, language_id=2)
        other_element = _url(db, tenant.id, "other", is_default=True, element_id="prod-2")

        cleared = defaults.unset_scope_defaults(db, tenant.id, "product", "prod-1", 1)
        db.commit()

        assert cleared == [en_default.id]
        assert _defaults(db, tenant.id) == []
        assert _defaults(db, tenant.id, language_id=2) == [de_default.id]
        assert _defaults(db, tenant.id, element_id="prod-2") == [other_element.id]

    def test_keep_id_is_left_alone(self, db, tenant, english):
        current = _url(db, tenant.id, "home", is_default=True)

        cleared = defaults.unset_scope_defaults(db, tenant.id, "product", "prod-1", 1, keep_id=current.id)
        assert cleared == []
        assert current.is_default is True


class TestMakeDefault:
    def test_moves_default_to_target(self, db, tenant, english):
        old = _url(db, tenant.id, "home", is_default=True)
        new = _url(db, tenant.id, "home-alt")

        defaults.make_default(db, new)
        db.commit()

        assert _defaults(db, tenant.id) == [new.id]
        db.refresh(old)
        assert old.is_default is False

    def test_is_idempotent(self, db, tenant, english):
        url = _url(db, tenant.id, "home", is_default=True)

        defaults.make_default(db, url)
        defaults.make_default(db, url)
        db.commit()

        assert _defaults(db, tenant.id) == [url.id]


class TestPromoteNextDefault:
    def test_promotes_earliest_remaining(self, db, tenant, english):
        first = _url(db, tenant.id, "a")
        _url(db, tenant.id, "b")

        promoted = defaults.promote_next_default(db, tenant.id, "product", "prod-1", 1)
        db.commit()

        assert promoted.id == first.id
        assert _defaults(db, tenant.id) == [first.id]

    def test_existing_default_is_kept(self, db, tenant, english):
        _url(db, tenant.id, "a")
        current = _url(db, tenant.id, "b", is_default=True)

        promoted = defaults.promote_next_default(db, tenant.id, "product", "prod-1", 1)
        assert promoted.id == current.id
        assert _defaults(db, tenant.id) == [current.id]

    def test_empty_scope_promotes_nothing(self, db, tenant, english):
        assert defaults.promote_next_default(db, tenant.id, "product", "prod-1", 1) is None

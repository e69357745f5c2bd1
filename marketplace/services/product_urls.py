"""
URL management for catalog elements (products by default).

Every mutating call runs in a single transaction and commits once. The
single-default rules live in domain.urls.defaults; persistence in domain.urls.store.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace import models, schemas
from marketplace.domain.urls import defaults, store
from marketplace.domain.urls.slugs import is_valid_slug
from marketplace.errors import ConflictError, NotFoundError, ValidationError
from marketplace.services import languages
from marketplace.services.elements import ensure_element_exists
from marketplace.tenancy import TenantContext

logger = logging.getLogger(__name__)

PRODUCT = models.ElementType.product.value


def _clean_slug(value: str | None) -> str:
    slug = (value or "").strip()
    if not slug:
        raise ValidationError("Slug is required when provided.", field="slug")
    if not is_valid_slug(slug):
        raise ValidationError(
            "Slug may only contain lowercase letters, digits and single hyphens.",
            field="slug",
        )
    return slug


def _require_language(db: Session, language_id: int) -> models.Language:
    language = languages.find_language(db, language_id)
    if not language:
        raise ValidationError("Invalid language ID.", field="language_id")
    return language


def _load_url(
    db: Session,
    tenant: TenantContext,
    url_id: int,
    element_id: str | None = None,
    element_type: str = PRODUCT,
) -> models.Url:
    url = store.find(db, tenant.id, url_id)
    if not url:
        raise NotFoundError("URL not found")
    if element_id is not None and (url.element_type != element_type or url.element_id != element_id):
        raise NotFoundError("URL not found")
    return url


# --- public API ---


def list_urls(
    db: Session,
    tenant: TenantContext,
    element_id: str,
    element_type: str = PRODUCT,
) -> list[models.Url]:
    ensure_element_exists(db, tenant.id, element_type, element_id)
    return store.get_by_element(db, tenant.id, element_type, element_id)


def get_url(
    db: Session,
    tenant: TenantContext,
    element_id: str,
    url_id: int,
    element_type: str = PRODUCT,
) -> models.Url:
    ensure_element_exists(db, tenant.id, element_type, element_id)
    return _load_url(db, tenant, url_id, element_id=element_id, element_type=element_type)


def create_url(
    db: Session,
    tenant: TenantContext,
    element_id: str,
    payload: schemas.ProductUrlCreate,
    element_type: str = PRODUCT,
) -> models.Url:
    ensure_element_exists(db, tenant.id, element_type, element_id)
    language = _require_language(db, payload.language_id)
    slug = _clean_slug(payload.slug)

    if store.slug_exists(db, tenant.id, slug, language.id):
        raise ConflictError(store.SLUG_TAKEN_MESSAGE, field="slug")

    if payload.default:
        defaults.unset_scope_defaults(db, tenant.id, element_type, element_id, language.id)

    url = store.create(
        db,
        tenant.id,
        {
            "element_type": element_type,
            "element_id": element_id,
            "language_id": language.id,
            "slug": slug,
            "is_default": payload.default,
        },
    )
    store.commit(db)
    db.refresh(url)
    logger.info(
        "Created url=%s tenant=%s element=%s:%s language=%s default=%s",
        url.id,
        tenant.id,
        element_type,
        element_id,
        language.code,
        url.is_default,
    )
    return url


def update_url(
    db: Session,
    tenant: TenantContext,
    url_id: int,
    payload: schemas.ProductUrlUpdate,
    element_id: str | None = None,
    element_type: str = PRODUCT,
) -> models.Url:
    url = _load_url(db, tenant, url_id, element_id=element_id, element_type=element_type)
    fields = payload.model_fields_set
    data: dict = {}

    if "slug" in fields:
        slug = _clean_slug(payload.slug)
        if store.slug_exists(db, tenant.id, slug, url.language_id, exclude_id=url.id):
            raise ConflictError(store.SLUG_TAKEN_MESSAGE, field="slug")
        data["slug"] = slug

    if "default" in fields and payload.default is not None:
        if payload.default and not url.is_default:
            defaults.unset_scope_defaults(
                db, tenant.id, url.element_type, url.element_id, url.language_id, keep_id=url.id
            )
        data["is_default"] = payload.default

    if data:
        url = store.update(db, tenant.id, url.id, data)
    store.commit(db)
    db.refresh(url)
    return url


def delete_url(
    db: Session,
    tenant: TenantContext,
    url_id: int,
    element_id: str | None = None,
    element_type: str = PRODUCT,
) -> bool:
    url = _load_url(db, tenant, url_id, element_id=element_id, element_type=element_type)
    was_default = url.is_default
    scope_element_type = url.element_type
    scope_element_id = url.element_id
    language_id = url.language_id

    removed = store.delete(db, tenant.id, url.id)
    if removed and was_default:
        try:
            defaults.promote_next_default(db, tenant.id, scope_element_type, scope_element_id, language_id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(
                "Default promotion failed, delete rolled back tenant=%s element=%s:%s language=%s url=%s",
                tenant.id,
                scope_element_type,
                scope_element_id,
                language_id,
                url_id,
            )
            if isinstance(exc, IntegrityError):
                raise store.conflict_from_integrity_error(exc) from exc
            raise
    store.commit(db)
    logger.info("Deleted url=%s tenant=%s was_default=%s", url_id, tenant.id, was_default)
    return removed


def set_as_default(
    db: Session,
    tenant: TenantContext,
    url_id: int,
    element_id: str | None = None,
    element_type: str = PRODUCT,
) -> models.Url:
    url = _load_url(db, tenant, url_id, element_id=element_id, element_type=element_type)
    defaults.make_default(db, url)
    store.commit(db)
    db.refresh(url)
    return url


def get_default_url_for_language(
    db: Session,
    tenant: TenantContext,
    element_id: str,
    language_id: int,
    element_type: str = PRODUCT,
) -> models.Url | None:
    return store.get_default_for_element(db, tenant.id, element_type, element_id, language_id)


def get_default_url(
    db: Session,
    tenant: TenantContext,
    element_id: str,
    language_code: str | None = None,
    element_type: str = PRODUCT,
) -> models.Url | None:
    """
    Unknown language codes and scopes without a default both return None.

    Without a code the tenant's ``default_language`` setting is used, then the
    language flagged as default.
    """
    code = (language_code or "").strip() or tenant.default_language_code
    if code:
        language = languages.find_language_by_code(db, code)
    else:
        language = languages.get_default_language(db)
    if not language:
        return None
    return get_default_url_for_language(db, tenant, element_id, language.id, element_type=element_type)


def generate_slug(db: Session, tenant: TenantContext, name: str, language_id: int) -> str:
    _require_language(db, language_id)
    return store.generate_unique_slug(db, tenant.id, name, language_id)


def is_slug_unique(
    db: Session,
    tenant: TenantContext,
    slug: str,
    language_id: int,
    exclude_id: int | None = None,
) -> bool:
    return not store.slug_exists(db, tenant.id, slug, language_id, exclude_id=exclude_id)

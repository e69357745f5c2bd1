"""
Persistence for URL records, always scoped to one tenant.

Writes flush immediately so store constraints (unique slug per language, single
default per element/language) surface here as ConflictError. Committing is left
to the calling service so a whole operation stays in one transaction.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import asc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace import models
from marketplace.domain.urls.slugs import generate_unique_slug as _generate_unique_slug
from marketplace.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "Slug already exists for this language"
DEFAULT_RACE_MESSAGE = "Another default URL was written for this language; retry"
CREATE_FIELDS = frozenset({"element_type", "element_id", "language_id", "slug", "is_default"})
UPDATE_FIELDS = frozenset({"slug", "is_default"})
_DEFAULT_SCOPE_MARKERS = ("uq_url_default_scope", "urls.element_type")


def conflict_from_integrity_error(exc: IntegrityError) -> ConflictError:
    text = str(getattr(exc, "orig", exc))
    if any(marker in text for marker in _DEFAULT_SCOPE_MARKERS):
        return ConflictError(DEFAULT_RACE_MESSAGE, field="default")
    return ConflictError(SLUG_TAKEN_MESSAGE, field="slug")


def _flush(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Url write rejected by store constraint: %s", getattr(exc, "orig", exc))
        raise conflict_from_integrity_error(exc) from exc


def commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Url commit rejected by store constraint: %s", getattr(exc, "orig", exc))
        raise conflict_from_integrity_error(exc) from exc


def _base_query(db: Session, tenant_id: str):
    return db.query(models.Url).filter(models.Url.tenant_id == tenant_id)


def find(db: Session, tenant_id: str, url_id: int) -> models.Url | None:
    return _base_query(db, tenant_id).filter(models.Url.id == url_id).first()


def get_by_element(db: Session, tenant_id: str, element_type: str, element_id: str) -> list[models.Url]:
    return (
        _base_query(db, tenant_id)
        .filter(
            models.Url.element_type == element_type,
            models.Url.element_id == element_id,
        )
        .order_by(asc(models.Url.id))
        .all()
    )


def get_by_element_and_language(
    db: Session,
    tenant_id: str,
    element_type: str,
    element_id: str,
    language_id: int,
    lock: bool = False,
) -> list[models.Url]:
    query = (
        _base_query(db, tenant_id)
        .filter(
            models.Url.element_type == element_type,
            models.Url.element_id == element_id,
            models.Url.language_id == language_id,
        )
        .order_by(asc(models.Url.id))
    )
    if lock:
        query = query.with_for_update(of=models.Url)
    return query.all()


def get_default_for_element(
    db: Session,
    tenant_id: str,
    element_type: str,
    element_id: str,
    language_id: int,
) -> models.Url | None:
    return (
        _base_query(db, tenant_id)
        .filter(
            models.Url.element_type == element_type,
            models.Url.element_id == element_id,
            models.Url.language_id == language_id,
            models.Url.is_default.is_(True),
        )
        .order_by(asc(models.Url.id))
        .first()
    )


def slug_exists(
    db: Session,
    tenant_id: str,
    slug: str,
    language_id: int,
    exclude_id: int | None = None,
) -> bool:
    query = db.query(models.Url.id).filter(
        models.Url.tenant_id == tenant_id,
        models.Url.language_id == language_id,
        models.Url.slug == slug,
    )
    if exclude_id is not None:
        query = query.filter(models.Url.id != exclude_id)
    return query.first() is not None


def generate_unique_slug(db: Session, tenant_id: str, name: str, language_id: int) -> str:
    return _generate_unique_slug(name, lambda candidate: slug_exists(db, tenant_id, candidate, language_id))


def create(db: Session, tenant_id: str, data: dict[str, Any]) -> models.Url:
    unknown = set(data) - CREATE_FIELDS
    if unknown:
        raise ValueError(f"Unknown url fields: {sorted(unknown)}")
    url = models.Url(tenant_id=tenant_id, **data)
    db.add(url)
    _flush(db)
    return url


def update(db: Session, tenant_id: str, url_id: int, data: dict[str, Any]) -> models.Url:
    url = find(db, tenant_id, url_id)
    if not url:
        raise NotFoundError("URL not found")
    unknown = set(data) - UPDATE_FIELDS
    if unknown:
        raise ValueError(f"Url fields cannot be updated: {sorted(unknown)}")
    for key, value in data.items():
        setattr(url, key, value)
    _flush(db)
    return url


def delete(db: Session, tenant_id: str, url_id: int) -> bool:
    url = find(db, tenant_id, url_id)
    if not url:
        return False
    db.delete(url)
    _flush(db)
    return True

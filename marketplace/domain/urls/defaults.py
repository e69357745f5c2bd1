"""
Single-default rules for URLs sharing (tenant, element, language).

Clearing siblings is flushed before a new default is written, so the partial
unique index on the scope never sees two defaults inside one flush.
"""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.orm import Session

from marketplace import models
from marketplace.domain.urls import store

logger = logging.getLogger(__name__)


def select_promotion_candidate(
    urls: Iterable[models.Url],
    excluded_id: int | None = None,
) -> models.Url | None:
    """Earliest created remaining URL (lowest id) wins."""
    remaining = [url for url in urls if url.id != excluded_id]
    if not remaining:
        return None
    return min(remaining, key=lambda url: url.id)


def unset_scope_defaults(
    db: Session,
    tenant_id: str,
    element_type: str,
    element_id: str,
    language_id: int,
    keep_id: int | None = None,
) -> list[int]:
    siblings = store.get_by_element_and_language(
        db, tenant_id, element_type, element_id, language_id, lock=True
    )
    cleared: list[int] = []
    for url in siblings:
        if url.is_default and url.id != keep_id:
            url.is_default = False
            cleared.append(url.id)
    if cleared:
        db.flush()
    return cleared


def make_default(db: Session, url: models.Url) -> models.Url:
    unset_scope_defaults(
        db, url.tenant_id, url.element_type, url.element_id, url.language_id, keep_id=url.id
    )
    if not url.is_default:
        url.is_default = True
        db.flush()
    return url


def promote_next_default(
    db: Session,
    tenant_id: str,
    element_type: str,
    element_id: str,
    language_id: int,
) -> models.Url | None:
    siblings = store.get_by_element_and_language(
        db, tenant_id, element_type, element_id, language_id, lock=True
    )
    current = next((url for url in siblings if url.is_default), None)
    if current is not None:
        return current
    candidate = select_promotion_candidate(siblings)
    if candidate is None:
        logger.info(
            "No url left to promote tenant=%s element=%s:%s language=%s",
            tenant_id,
            element_type,
            element_id,
            language_id,
        )
        return None
    candidate.is_default = True
    db.flush()
    logger.info(
        "Promoted url=%s to default tenant=%s element=%s:%s language=%s",
        candidate.id,
        tenant_id,
        element_type,
        element_id,
        language_id,
    )
    return candidate

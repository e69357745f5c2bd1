"""
Tenant lifecycle: creation, activation, deactivation, soft delete and settings.

Every state change appends one TenantAuditLog row in the same transaction as the
change itself.
"""
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from sqlalchemy import asc
from sqlalchemy.orm import Session

from marketplace import models
from marketplace.domain.tenancy.settings import (
    dump_tenant_settings,
    load_tenant_settings,
    merge_tenant_settings,
    normalize_tenant_settings,
)
from marketplace.domain.urls.slugs import normalize_slug
from marketplace.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _append_audit(
    db: Session,
    tenant: models.Tenant,
    action: models.TenantAuditAction,
    reason: str | None = None,
    actor: str | None = None,
    payload: Mapping[str, Any] | None = None,
) -> models.TenantAuditLog:
    entry = models.TenantAuditLog(
        tenant_id=tenant.id,
        action=action,
        reason=(reason or "").strip() or None,
        actor=(actor or "").strip() or None,
        payload_json=json.dumps(dict(payload), ensure_ascii=True, default=str) if payload else None,
    )
    db.add(entry)
    return entry


def _ensure_unique_tenant_slug(db: Session, desired_slug: str) -> str:
    base = normalize_slug(desired_slug, fallback="tenant")
    candidate = base
    suffix = 2
    while db.query(models.Tenant.id).filter(models.Tenant.slug == candidate).first() is not None:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def get_tenant(db: Session, tenant_id: str, include_deleted: bool = False) -> models.Tenant:
    query = db.query(models.Tenant).filter(models.Tenant.id == tenant_id)
    if not include_deleted:
        query = query.filter(models.Tenant.deleted_at.is_(None))
    tenant = query.first()
    if not tenant:
        raise NotFoundError("Tenant not found")
    return tenant


def list_tenants(
    db: Session,
    status: models.TenantStatus | None = None,
    include_deleted: bool = False,
) -> list[models.Tenant]:
    query = db.query(models.Tenant)
    if status is not None:
        query = query.filter(models.Tenant.status == status)
    if not include_deleted:
        query = query.filter(models.Tenant.deleted_at.is_(None))
    return query.order_by(asc(models.Tenant.name)).all()


def create_tenant(
    db: Session,
    name: str,
    slug: str | None = None,
    settings: Mapping[str, Any] | None = None,
    tenant_id: str | None = None,
) -> models.Tenant:
    cleaned_name = (name or "").strip()
    if not cleaned_name:
        raise ValidationError("Name is required", field="name")
    existing = db.query(models.Tenant.id).filter(models.Tenant.name == cleaned_name).first()
    if existing:
        raise ConflictError("A tenant with this name already exists.", field="name")
    try:
        normalized_settings = normalize_tenant_settings(settings or {})
    except ValueError as exc:
        raise ValidationError(str(exc), field="settings") from exc

    tenant = models.Tenant(
        id=tenant_id or str(uuid.uuid4()),
        name=cleaned_name,
        slug=_ensure_unique_tenant_slug(db, slug or cleaned_name),
        status=models.TenantStatus.active,
        settings_json=dump_tenant_settings(normalized_settings),
    )
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    logger.info("Created tenant=%s slug=%s", tenant.id, tenant.slug)
    return tenant


def activate_tenant(db: Session, tenant_id: str, reason: str | None = None, actor: str | None = None) -> models.Tenant:
    tenant = get_tenant(db, tenant_id)
    if tenant.status == models.TenantStatus.active:
        raise ConflictError("Tenant is already active", field="status")
    tenant.status = models.TenantStatus.active
    _append_audit(db, tenant, models.TenantAuditAction.activated, reason=reason, actor=actor)
    db.commit()
    db.refresh(tenant)
    logger.info("Activated tenant=%s by=%s", tenant.id, actor)
    return tenant


def deactivate_tenant(
    db: Session,
    tenant_id: str,
    reason: str | None = None,
    actor: str | None = None,
) -> models.Tenant:
    tenant = get_tenant(db, tenant_id)
    if tenant.status == models.TenantStatus.inactive:
        raise ConflictError("Tenant is already inactive", field="status")
    tenant.status = models.TenantStatus.inactive
    _append_audit(db, tenant, models.TenantAuditAction.deactivated, reason=reason, actor=actor)
    db.commit()
    db.refresh(tenant)
    logger.info("Deactivated tenant=%s by=%s", tenant.id, actor)
    return tenant


def bulk_update_status(
    db: Session,
    tenant_ids: Iterable[str],
    status: models.TenantStatus,
    reason: str | None = None,
    actor: str | None = None,
) -> int:
    """Only tenants not already in ``status`` are touched. Returns how many changed."""
    ids = sorted({item.strip() for item in tenant_ids if item and item.strip()})
    if not ids:
        return 0
    tenants = (
        db.query(models.Tenant)
        .filter(
            models.Tenant.id.in_(ids),
            models.Tenant.deleted_at.is_(None),
            models.Tenant.status != status,
        )
        .all()
    )
    action = (
        models.TenantAuditAction.activated
        if status == models.TenantStatus.active
        else models.TenantAuditAction.deactivated
    )
    for tenant in tenants:
        tenant.status = status
        _append_audit(db, tenant, action, reason=reason, actor=actor, payload={"bulk": True})
    db.commit()
    logger.info("Bulk status=%s changed=%s requested=%s", status.value, len(tenants), len(ids))
    return len(tenants)


def delete_tenant(db: Session, tenant_id: str, reason: str | None = None, actor: str | None = None) -> bool:
    tenant = get_tenant(db, tenant_id)
    deleted_at = datetime.now(timezone.utc)
    tenant.deleted_at = deleted_at
    tenant.status = models.TenantStatus.inactive
    _append_audit(
        db,
        tenant,
        models.TenantAuditAction.deleted,
        reason=reason,
        actor=actor,
        payload={"deleted_at": deleted_at.isoformat()},
    )
    db.commit()
    logger.info("Soft deleted tenant=%s by=%s", tenant.id, actor)
    return True


def update_tenant_settings(
    db: Session,
    tenant_id: str,
    updates: Mapping[str, Any],
    actor: str | None = None,
) -> models.Tenant:
    tenant = get_tenant(db, tenant_id)
    current = load_tenant_settings(tenant.settings_json)
    try:
        merged = merge_tenant_settings(current, updates)
    except ValueError as exc:
        raise ValidationError(str(exc), field="settings") from exc
    changed = sorted(key for key in set(current) | set(merged) if current.get(key) != merged.get(key))
    if not changed:
        return tenant
    tenant.settings_json = dump_tenant_settings(merged)
    _append_audit(
        db,
        tenant,
        models.TenantAuditAction.settings_updated,
        actor=actor,
        payload={"changed": changed},
    )
    db.commit()
    db.refresh(tenant)
    return tenant


def list_audit_log(db: Session, tenant_id: str) -> list[models.TenantAuditLog]:
    tenant = get_tenant(db, tenant_id, include_deleted=True)
    return (
        db.query(models.TenantAuditLog)
        .filter(models.TenantAuditLog.tenant_id == tenant.id)
        .order_by(asc(models.TenantAuditLog.id))
        .all()
    )

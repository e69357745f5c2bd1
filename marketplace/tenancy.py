from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Header, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from marketplace import models
from marketplace.db import get_db
from marketplace.domain.tenancy.settings import load_tenant_settings


@dataclass(frozen=True, slots=True)
class TenantContext:
    """Tenant the current operation runs for. Passed explicitly into services."""

    id: str
    slug: str
    name: str
    status: str
    settings: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status == models.TenantStatus.active.value

    @property
    def default_language_code(self) -> str | None:
        return self.settings.get("default_language")


def _resolve_tenant(db: Session, tenant_id: str | None, tenant_slug: str | None) -> models.Tenant | None:
    query = db.query(models.Tenant).filter(models.Tenant.deleted_at.is_(None))
    tenant_id = (tenant_id or "").strip()
    if tenant_id:
        return query.filter(models.Tenant.id == tenant_id).first()
    if tenant_slug:
        slug = tenant_slug.strip().lower()
        if slug:
            return query.filter(func.lower(models.Tenant.slug) == slug).first()
    return None


def resolve_tenant(db: Session, tenant_id: str | None, tenant_slug: str | None) -> models.Tenant | None:
    return _resolve_tenant(db, tenant_id=tenant_id, tenant_slug=tenant_slug)


def build_tenant_context(tenant: models.Tenant) -> TenantContext:
    return TenantContext(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        status=tenant.status.value,
        settings=load_tenant_settings(tenant.settings_json),
    )


def get_tenant_context(
    db: Session = Depends(get_db),
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    x_tenant: str | None = Header(default=None, alias="X-Tenant"),
) -> TenantContext:
    if not (x_tenant_id or "").strip() and not (x_tenant or "").strip():
        raise HTTPException(status_code=400, detail="X-Tenant-Id or X-Tenant header is required")

    tenant = _resolve_tenant(db, tenant_id=x_tenant_id, tenant_slug=x_tenant)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    if tenant.status != models.TenantStatus.active:
        raise HTTPException(status_code=403, detail="Tenant is inactive")

    return build_tenant_context(tenant)

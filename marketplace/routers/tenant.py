from fastapi import APIRouter, Depends

from marketplace import schemas
from marketplace.db import settings
from marketplace.domain.tenancy.settings import branding_config
from marketplace.tenancy import TenantContext, get_tenant_context

router = APIRouter(prefix="/api/v1/tenant", tags=["tenant"])


@router.get("/config", response_model=schemas.TenantConfigOut)
def get_tenant_config(tenant: TenantContext = Depends(get_tenant_context)):
    return {
        "id": tenant.id,
        "slug": tenant.slug,
        "name": tenant.name,
        "status": tenant.status,
        "default_language": tenant.default_language_code or settings.default_language_code,
        "branding": branding_config(tenant.name, tenant.settings),
    }

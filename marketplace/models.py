from marketplace.domain.core.enums import ElementType, TenantAuditAction, TenantStatus
from marketplace.domain.catalog.models import Product
from marketplace.domain.i18n.models import Language
from marketplace.domain.tenancy.models import Tenant, TenantAuditLog
from marketplace.domain.urls.models import Url

__all__ = [
    "ElementType",
    "TenantAuditAction",
    "TenantStatus",
    "Tenant",
    "TenantAuditLog",
    "Language",
    "Product",
    "Url",
]

import enum


class TenantStatus(enum.Enum):
    active = "active"
    inactive = "inactive"


class TenantAuditAction(enum.Enum):
    activated = "activated"
    deactivated = "deactivated"
    deleted = "deleted"
    settings_updated = "settings_updated"


class ElementType(enum.Enum):
    product = "product"

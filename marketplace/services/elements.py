"""Existence lookup for the entities URLs attach to."""
from __future__ import annotations

from sqlalchemy.orm import Session

from marketplace import models
from marketplace.errors import NotFoundError, ValidationError

ELEMENT_MODELS = {
    models.ElementType.product.value: models.Product,
}


def find_element(db: Session, tenant_id: str, element_type: str, element_id: str):
    model = ELEMENT_MODELS.get(element_type)
    if model is None:
        raise ValidationError(f"Unsupported element type: {element_type}", field="element_type")
    return db.query(model).filter(model.id == element_id, model.tenant_id == tenant_id).first()


def ensure_element_exists(db: Session, tenant_id: str, element_type: str, element_id: str) -> None:
    if find_element(db, tenant_id, element_type, element_id) is None:
        raise NotFoundError(f"{element_type.capitalize()} not found")

import os
import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace import models
from marketplace.db import Base, SessionLocal, engine
from marketplace.domain.tenancy.settings import dump_tenant_settings, normalize_tenant_settings
from marketplace.domain.urls import store


def uid() -> str:
    return str(uuid.uuid4())


def ensure_tenant(db: Session, name: str, slug: str) -> models.Tenant:
    normalized_slug = slug.strip().lower()
    tenant = db.scalar(select(models.Tenant).where(models.Tenant.slug == normalized_slug))
    if tenant:
        tenant.name = name
        return tenant

    tenant = models.Tenant(
        id=uid(),
        name=name,
        slug=normalized_slug,
        status=models.TenantStatus.active,
        settings_json=dump_tenant_settings(normalize_tenant_settings({"default_language": "en"})),
    )
    db.add(tenant)
    db.flush()
    return tenant


def ensure_language(db: Session, code: str, name: str, is_default: bool = False) -> models.Language:
    language = (
        db.query(models.Language)
        .filter(models.Language.code == code)
        .first()
    )
    if language:
        language.name = name
        language.is_default = is_default
        return language
    language = models.Language(code=code, name=name, is_default=is_default)
    db.add(language)
    db.flush()
    return language


def get_or_create_product(db: Session, tenant_id: str, name: str) -> models.Product:
    product = db.scalar(
        select(models.Product).where(
            models.Product.tenant_id == tenant_id,
            models.Product.name == name,
        )
    )
    if product:
        return product
    product = models.Product(id=uid(), tenant_id=tenant_id, name=name, is_active=True)
    db.add(product)
    db.flush()
    return product


def ensure_default_url(db: Session, tenant_id: str, product: models.Product, language: models.Language) -> models.Url:
    existing = store.get_default_for_element(db, tenant_id, "product", product.id, language.id)
    if existing:
        return existing
    slug = store.generate_unique_slug(db, tenant_id, product.name, language.id)
    return store.create(
        db,
        tenant_id,
        {
            "element_type": "product",
            "element_id": product.id,
            "language_id": language.id,
            "slug": slug,
            "is_default": True,
        },
    )


def main() -> None:
    if os.getenv("SEED_CREATE_TABLES", "").strip().lower() in ("1", "true", "yes"):
        Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        tenant = ensure_tenant(
            db,
            name=os.getenv("DEFAULT_TENANT_NAME", "Demo Store"),
            slug=os.getenv("DEFAULT_TENANT_SLUG", "demo"),
        )
        english = ensure_language(db, "en", "English", is_default=True)
        german = ensure_language(db, "de", "Deutsch")

        for name in ("Test Product", "Winter Jacket", "Wanderschuhe Größe 42"):
            product = get_or_create_product(db, tenant.id, name)
            ensure_default_url(db, tenant.id, product, english)
            ensure_default_url(db, tenant.id, product, german)

        db.commit()
        print("Seed OK")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    main()

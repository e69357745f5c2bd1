"""Shared fixtures: in-memory SQLite database, a tenant, languages and a product."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace import models
from marketplace.db import Base, get_db
from marketplace.main import app
from marketplace.tenancy import build_tenant_context

TENANT_ID = "11111111-1111-1111-1111-111111111111"
OTHER_TENANT_ID = "22222222-2222-2222-2222-222222222222"
PRODUCT_ID = "prod-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tenant(db):
    tenant = models.Tenant(
        id=TENANT_ID,
        name="Acme",
        slug="acme",
        status=models.TenantStatus.active,
        settings_json='{"default_language": "en", "theme.primary_color": "#112233"}',
    )
    db.add(tenant)
    db.commit()
    return tenant


@pytest.fixture
def other_tenant(db):
    tenant = models.Tenant(id=OTHER_TENANT_ID, name="Globex", slug="globex", status=models.TenantStatus.active)
    db.add(tenant)
    db.commit()
    return tenant


@pytest.fixture
def ctx(tenant):
    return build_tenant_context(tenant)


@pytest.fixture
def english(db):
    language = models.Language(id=1, code="en", name="English", is_default=True)
    db.add(language)
    db.commit()
    return language


@pytest.fixture
def german(db, english):
    language = models.Language(id=2, code="de", name="Deutsch", is_default=False)
    db.add(language)
    db.commit()
    return language


@pytest.fixture
def product(db, tenant):
    product = models.Product(id=PRODUCT_ID, tenant_id=tenant.id, name="Test Product")
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def second_product(db, tenant):
    product = models.Product(id="prod-2", tenant_id=tenant.id, name="Second Product")
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def headers(tenant):
    return {"X-Tenant-Id": tenant.id}

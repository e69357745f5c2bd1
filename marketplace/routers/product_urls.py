from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from marketplace import models, schemas
from marketplace.db import get_db
from marketplace.services import languages, product_urls
from marketplace.services.elements import ensure_element_exists
from marketplace.tenancy import TenantContext, get_tenant_context

router = APIRouter(prefix="/api/v1/products/{product_id}/urls", tags=["product-urls"])

DELETED_MESSAGE = (
    "URL deleted successfully. If this was the default URL, another URL has been promoted to default."
)


def _ensure_product(db: Session, tenant: TenantContext, product_id: str) -> None:
    ensure_element_exists(db, tenant.id, product_urls.PRODUCT, product_id)


def _url_out_payload(url: models.Url) -> dict:
    language = url.language
    return {
        "id": url.id,
        "slug": url.slug,
        "default": bool(url.is_default),
        "language": (
            {"id": language.id, "code": language.code, "name": language.name} if language is not None else None
        ),
        "element_type": url.element_type,
        "element_id": url.element_id,
        "created_at": url.created_at,
        "updated_at": url.updated_at,
    }


@router.get("", response_model=schemas.ProductUrlListResponse)
def list_product_urls(
    product_id: str,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    urls = product_urls.list_urls(db, tenant, product_id)
    return {"data": [_url_out_payload(url) for url in urls]}


@router.post("", response_model=schemas.ProductUrlResponse, status_code=201)
def create_product_url(
    product_id: str,
    payload: schemas.ProductUrlCreate,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    url = product_urls.create_url(db, tenant, product_id, payload)
    return {"data": _url_out_payload(url)}


# Static paths must stay above "/{url_id}".
@router.get("/default", response_model=schemas.ProductUrlResponse)
def get_default_product_url(
    product_id: str,
    language_code: str | None = Query(default=None),
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    _ensure_product(db, tenant, product_id)
    if not (language_code or "").strip():
        raise HTTPException(status_code=400, detail="Language code is required")

    language = languages.find_language_by_code(db, language_code)
    if not language:
        raise HTTPException(status_code=404, detail="Language not found")

    url = product_urls.get_default_url_for_language(db, tenant, product_id, language.id)
    if not url:
        return JSONResponse(status_code=404, content={"message": "No default URL found", "data": None})
    return {"data": _url_out_payload(url)}


@router.post("/generate-slug", response_model=schemas.SlugResponse)
def generate_product_slug(
    product_id: str,
    payload: schemas.GenerateSlugRequest,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    _ensure_product(db, tenant, product_id)
    slug = product_urls.generate_slug(db, tenant, payload.name, payload.language_id)
    return {"data": {"slug": slug}}


@router.get("/{url_id}", response_model=schemas.ProductUrlResponse)
def get_product_url(
    product_id: str,
    url_id: int,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    url = product_urls.get_url(db, tenant, product_id, url_id)
    return {"data": _url_out_payload(url)}


@router.put("/{url_id}", response_model=schemas.ProductUrlResponse)
def update_product_url(
    product_id: str,
    url_id: int,
    payload: schemas.ProductUrlUpdate,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    _ensure_product(db, tenant, product_id)
    url = product_urls.update_url(db, tenant, url_id, payload, element_id=product_id)
    return {"data": _url_out_payload(url)}


@router.delete("/{url_id}", response_model=schemas.MessageOut)
def delete_product_url(
    product_id: str,
    url_id: int,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    _ensure_product(db, tenant, product_id)
    product_urls.delete_url(db, tenant, url_id, element_id=product_id)
    return {"message": DELETED_MESSAGE}


@router.post("/{url_id}/set-default", response_model=schemas.ProductUrlResponse)
def set_default_product_url(
    product_id: str,
    url_id: int,
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
):
    _ensure_product(db, tenant, product_id)
    url = product_urls.set_as_default(db, tenant, url_id, element_id=product_id)
    return {"data": _url_out_payload(url)}

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# Languages


class LanguageOut(BaseModel):
    id: int
    code: str
    name: str
    is_default: bool = False

    class Config:
        from_attributes = True


class LanguageListOut(BaseModel):
    data: List[LanguageOut]


# Product URLs


class UrlLanguageOut(BaseModel):
    id: int
    code: str
    name: str


class ProductUrlOut(BaseModel):
    id: int
    slug: str
    default: bool
    language: Optional[UrlLanguageOut] = None
    element_type: str
    element_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductUrlResponse(BaseModel):
    data: ProductUrlOut


class ProductUrlListResponse(BaseModel):
    data: List[ProductUrlOut]


class ProductUrlCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=255)
    language_id: int
    default: bool = False


class ProductUrlUpdate(BaseModel):
    slug: Optional[str] = Field(default=None, max_length=255)
    default: Optional[bool] = None


class GenerateSlugRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    language_id: int


class SlugOut(BaseModel):
    slug: str


class SlugResponse(BaseModel):
    data: SlugOut


class MessageOut(BaseModel):
    message: str


# Tenant


class TenantBrandingOut(BaseModel):
    name: str
    display_name: str
    logo_url: Optional[str] = None
    primary_color: str
    secondary_color: str


class TenantConfigOut(BaseModel):
    id: str
    slug: str
    name: str
    status: str
    default_language: Optional[str] = None
    branding: TenantBrandingOut

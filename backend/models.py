"""
Pydantic models for request/response validation.

Request bodies accept camelCase (what the dashboard sends) or snake_case.
Responses are serialized by alias so the dashboard gets camelCase back.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Shared base — allows construction by Python name or alias, and from ORM rows."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Store Models ────────────────────────────────────────────────────

class StoreCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)


class StoreUpdateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)


class StoreResponse(ApiModel):
    id: str
    name: str
    user_id: str = Field(..., alias="userId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# ── Billboard Models ────────────────────────────────────────────────

class BillboardCreateRequest(ApiModel):
    label: str = Field(..., min_length=1, max_length=200)
    image_url: str = Field(..., alias="imageUrl", min_length=1)


class BillboardUpdateRequest(BillboardCreateRequest):
    pass


class BillboardResponse(ApiModel):
    id: str
    store_id: str = Field(..., alias="storeId")
    label: str
    image_url: str = Field(..., alias="imageUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# ── Category Models ─────────────────────────────────────────────────

class CategoryCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    billboard_id: str = Field(..., alias="billboardId", min_length=1)


class CategoryUpdateRequest(CategoryCreateRequest):
    pass


class CategoryResponse(ApiModel):
    id: str
    store_id: str = Field(..., alias="storeId")
    billboard_id: str = Field(..., alias="billboardId")
    name: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# ── Product Models ──────────────────────────────────────────────────

class ProductCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., gt=0)
    category_id: str = Field(..., alias="categoryId", min_length=1)
    is_featured: bool = Field(False, alias="isFeatured")
    is_archived: bool = Field(False, alias="isArchived")


class ProductUpdateRequest(ProductCreateRequest):
    pass


class ProductResponse(ApiModel):
    id: str
    store_id: str = Field(..., alias="storeId")
    category_id: str = Field(..., alias="categoryId")
    name: str
    price: float
    is_featured: bool = Field(..., alias="isFeatured")
    is_archived: bool = Field(..., alias="isArchived")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# ── Order Models ────────────────────────────────────────────────────

class OrderSummary(ApiModel):
    """Row of the dashboard orders table."""
    id: str
    phone: str
    address: str
    products: str  # comma-joined product names
    total_price: float = Field(..., alias="totalPrice")
    is_paid: bool = Field(..., alias="isPaid")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# ── Checkout Models ─────────────────────────────────────────────────

class CheckoutRequest(ApiModel):
    product_ids: List[str] = Field(default_factory=list, alias="productIds")


class CheckoutResponse(ApiModel):
    url: str


def serialize(schema: type[ApiModel], obj) -> dict:
    """ORM row → camelCase JSON-ready dict."""
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")

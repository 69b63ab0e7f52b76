"""
Product endpoints — storefront listing (archived products hidden) and
owner-only catalog management.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import get_existing_store, require_store_owner
from domain.errors import NotFoundError
from domain.responses import success_response
from models import ProductCreateRequest, ProductResponse, ProductUpdateRequest, serialize
from services import product_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/{store_id}/products", tags=["products"])


@router.post("")
async def create_product(
    request: ProductCreateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await product_service.create_product(
        db,
        store_id=store.id,
        category_id=request.category_id,
        name=request.name,
        price=request.price,
        is_featured=request.is_featured,
        is_archived=request.is_archived,
    )
    await db.commit()
    await db.refresh(product)
    return success_response(data=serialize(ProductResponse, product))


@router.get("")
async def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    """Storefront listing. Filters: categoryId, isFeatured. Archived products never appear."""
    products = await product_service.list_products(
        db,
        store_id=store.id,
        category_id=category_id,
        is_featured=is_featured,
    )
    return success_response(
        data=[serialize(ProductResponse, p) for p in products],
        meta={"total": len(products)},
    )


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    product = await product_service.get_product(db, store_id=store.id, product_id=product_id)
    if not product:
        raise NotFoundError("Product", product_id, store_id=store.id)
    return success_response(data=serialize(ProductResponse, product))


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await product_service.update_product(
        db,
        store_id=store.id,
        product_id=product_id,
        category_id=request.category_id,
        name=request.name,
        price=request.price,
        is_featured=request.is_featured,
        is_archived=request.is_archived,
    )
    await db.commit()
    await db.refresh(product)
    return success_response(data=serialize(ProductResponse, product))


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await product_service.delete_product(db, store_id=store.id, product_id=product_id)
    await db.commit()
    logger.info(f"Product {product.id} deleted from store {store.id}")
    return success_response(data={"id": product.id, "message": f"Product '{product.name}' deleted"})

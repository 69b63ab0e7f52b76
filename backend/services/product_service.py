"""
Product service — the store catalog.

Archived products stay in the database (orders reference them) but are
hidden from the storefront listing.
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import OrderItem, Product
from domain.errors import ConflictError, NotFoundError
from services import category_service

logger = logging.getLogger(__name__)


async def _require_category(db: AsyncSession, *, store_id: str, category_id: str) -> None:
    category = await category_service.get_category(db, store_id=store_id, category_id=category_id)
    if not category:
        raise NotFoundError("Category", category_id, store_id=store_id)


async def create_product(
    db: AsyncSession,
    *,
    store_id: str,
    category_id: str,
    name: str,
    price: float,
    is_featured: bool = False,
    is_archived: bool = False,
) -> Product:
    await _require_category(db, store_id=store_id, category_id=category_id)

    product = Product(
        store_id=store_id,
        category_id=category_id,
        name=name,
        price=price,
        is_featured=is_featured,
        is_archived=is_archived,
    )
    db.add(product)
    await db.flush()
    return product


async def list_products(
    db: AsyncSession,
    *,
    store_id: str,
    category_id: str | None = None,
    is_featured: bool | None = None,
    include_archived: bool = False,
) -> list[Product]:
    """List a store's products, newest first. Archived products are skipped by default."""
    query = select(Product).where(Product.store_id == store_id)
    if category_id:
        query = query.where(Product.category_id == category_id)
    if is_featured is not None:
        query = query.where(Product.is_featured == is_featured)
    if not include_archived:
        query = query.where(Product.is_archived == False)  # noqa: E712

    res = await db.execute(query.order_by(Product.created_at.desc()))
    return res.scalars().all()


async def get_product(db: AsyncSession, *, store_id: str, product_id: str) -> Product | None:
    """Get a single product by ID, ensuring it belongs to the store."""
    res = await db.execute(
        select(Product).where(
            Product.id == product_id,
            Product.store_id == store_id,
        )
    )
    return res.scalar_one_or_none()


async def update_product(
    db: AsyncSession,
    *,
    store_id: str,
    product_id: str,
    category_id: str,
    name: str,
    price: float,
    is_featured: bool,
    is_archived: bool,
) -> Product:
    product = await get_product(db, store_id=store_id, product_id=product_id)
    if not product:
        raise NotFoundError("Product", product_id, store_id=store_id)
    await _require_category(db, store_id=store_id, category_id=category_id)

    product.category_id = category_id
    product.name = name
    product.price = price
    product.is_featured = is_featured
    product.is_archived = is_archived
    product.updated_at = datetime.utcnow()
    await db.flush()
    return product


async def delete_product(db: AsyncSession, *, store_id: str, product_id: str) -> Product:
    """Delete a product that no order references. Ordered products can only be archived."""
    product = await get_product(db, store_id=store_id, product_id=product_id)
    if not product:
        raise NotFoundError("Product", product_id, store_id=store_id)

    ordered = (
        await db.execute(
            select(func.count()).select_from(OrderItem).where(OrderItem.product_id == product_id)
        )
    ).scalar_one()
    if ordered:
        raise ConflictError(
            f"Product appears in {ordered} order items. Archive it instead.",
            dependents="order_items",
            count=ordered,
        )

    await db.delete(product)
    await db.flush()
    return product

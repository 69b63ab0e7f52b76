"""
Category service — product groupings, each displayed under a billboard.
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Category, Product
from domain.errors import ConflictError, NotFoundError
from services import billboard_service

logger = logging.getLogger(__name__)


async def _require_billboard(db: AsyncSession, *, store_id: str, billboard_id: str) -> None:
    billboard = await billboard_service.get_billboard(db, store_id=store_id, billboard_id=billboard_id)
    if not billboard:
        raise NotFoundError("Billboard", billboard_id, store_id=store_id)


async def create_category(db: AsyncSession, *, store_id: str, name: str, billboard_id: str) -> Category:
    await _require_billboard(db, store_id=store_id, billboard_id=billboard_id)

    category = Category(store_id=store_id, name=name, billboard_id=billboard_id)
    db.add(category)
    await db.flush()
    return category


async def list_categories(db: AsyncSession, *, store_id: str) -> list[Category]:
    res = await db.execute(
        select(Category)
        .where(Category.store_id == store_id)
        .order_by(Category.created_at.desc())
    )
    return res.scalars().all()


async def get_category(db: AsyncSession, *, store_id: str, category_id: str) -> Category | None:
    res = await db.execute(
        select(Category).where(
            Category.id == category_id,
            Category.store_id == store_id,
        )
    )
    return res.scalar_one_or_none()


async def update_category(
    db: AsyncSession,
    *,
    store_id: str,
    category_id: str,
    name: str,
    billboard_id: str,
) -> Category:
    category = await get_category(db, store_id=store_id, category_id=category_id)
    if not category:
        raise NotFoundError("Category", category_id, store_id=store_id)
    await _require_billboard(db, store_id=store_id, billboard_id=billboard_id)

    category.name = name
    category.billboard_id = billboard_id
    category.updated_at = datetime.utcnow()
    await db.flush()
    return category


async def delete_category(db: AsyncSession, *, store_id: str, category_id: str) -> Category:
    """Delete a category with no products left in it."""
    category = await get_category(db, store_id=store_id, category_id=category_id)
    if not category:
        raise NotFoundError("Category", category_id, store_id=store_id)

    in_use = (
        await db.execute(
            select(func.count()).select_from(Product).where(Product.category_id == category_id)
        )
    ).scalar_one()
    if in_use:
        raise ConflictError(
            f"Category still contains {in_use} products. Remove them first.",
            dependents="products",
            count=in_use,
        )

    await db.delete(category)
    await db.flush()
    return category

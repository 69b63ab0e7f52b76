"""
Store service — tenant stores owned by dashboard users.

Also decides where the dashboard landing page sends a user (sign-in,
their first store, or the store-creation modal).
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db_models import Billboard, Category, Order, Product, Store
from domain.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


async def create_store(db: AsyncSession, *, user_id: str, name: str) -> Store:
    store = Store(user_id=user_id, name=name)
    db.add(store)
    await db.flush()
    logger.info(f"Store created: {store.id} ({name!r}) for user {user_id}")
    return store


async def list_user_stores(db: AsyncSession, *, user_id: str) -> list[Store]:
    res = await db.execute(
        select(Store)
        .where(Store.user_id == user_id)
        .order_by(Store.created_at.asc())
    )
    return res.scalars().all()


async def get_store(db: AsyncSession, *, store_id: str) -> Store | None:
    res = await db.execute(select(Store).where(Store.id == store_id))
    return res.scalar_one_or_none()


async def rename_store(db: AsyncSession, *, store_id: str, name: str) -> Store:
    store = await get_store(db, store_id=store_id)
    if not store:
        raise NotFoundError("Store", store_id)

    store.name = name
    store.updated_at = datetime.utcnow()
    await db.flush()
    return store


async def delete_store(db: AsyncSession, *, store_id: str) -> Store:
    """
    Delete a store that has no catalog left.

    Billboards, categories and products must be removed first. A store with
    orders is never deleted.
    """
    store = await get_store(db, store_id=store_id)
    if not store:
        raise NotFoundError("Store", store_id)

    for model, label in ((Product, "products"), (Category, "categories"), (Billboard, "billboards")):
        count = (
            await db.execute(select(func.count()).select_from(model).where(model.store_id == store_id))
        ).scalar_one()
        if count:
            raise ConflictError(
                f"Store still has {count} {label}. Remove all products and categories first.",
                dependents=label,
                count=count,
            )

    orders = (
        await db.execute(select(func.count()).select_from(Order).where(Order.store_id == store_id))
    ).scalar_one()
    if orders:
        raise ConflictError(
            f"Store has {orders} orders and cannot be deleted.",
            dependents="orders",
            count=orders,
        )

    await db.delete(store)
    await db.flush()
    logger.info(f"Store deleted: {store_id}")
    return store


async def resolve_landing_path(db: AsyncSession, *, user_id: str | None) -> str | None:
    """
    Where the dashboard root should send the user.

    Returns the sign-in URL for anonymous users, "/<store_id>" for users who
    already own a store, or None when the store-creation modal should be shown.
    """
    if not user_id:
        return settings.sign_in_url

    res = await db.execute(
        select(Store)
        .where(Store.user_id == user_id)
        .order_by(Store.created_at.asc())
        .limit(1)
    )
    store = res.scalar_one_or_none()
    if store:
        return f"/{store.id}"
    return None

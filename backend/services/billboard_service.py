"""
Billboard service — promotional banners shown at the top of category pages.
"""

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Billboard, Category
from domain.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


async def create_billboard(db: AsyncSession, *, store_id: str, label: str, image_url: str) -> Billboard:
    billboard = Billboard(store_id=store_id, label=label, image_url=image_url)
    db.add(billboard)
    await db.flush()
    return billboard


async def list_billboards(db: AsyncSession, *, store_id: str) -> list[Billboard]:
    res = await db.execute(
        select(Billboard)
        .where(Billboard.store_id == store_id)
        .order_by(Billboard.created_at.desc())
    )
    return res.scalars().all()


async def get_billboard(db: AsyncSession, *, store_id: str, billboard_id: str) -> Billboard | None:
    """Get a single billboard, ensuring it belongs to the store."""
    res = await db.execute(
        select(Billboard).where(
            Billboard.id == billboard_id,
            Billboard.store_id == store_id,
        )
    )
    return res.scalar_one_or_none()


async def update_billboard(
    db: AsyncSession,
    *,
    store_id: str,
    billboard_id: str,
    label: str,
    image_url: str,
) -> Billboard:
    billboard = await get_billboard(db, store_id=store_id, billboard_id=billboard_id)
    if not billboard:
        raise NotFoundError("Billboard", billboard_id, store_id=store_id)

    billboard.label = label
    billboard.image_url = image_url
    billboard.updated_at = datetime.utcnow()
    await db.flush()
    return billboard


async def delete_billboard(db: AsyncSession, *, store_id: str, billboard_id: str) -> Billboard:
    """Delete a billboard no category is using."""
    billboard = await get_billboard(db, store_id=store_id, billboard_id=billboard_id)
    if not billboard:
        raise NotFoundError("Billboard", billboard_id, store_id=store_id)

    in_use = (
        await db.execute(
            select(func.count()).select_from(Category).where(Category.billboard_id == billboard_id)
        )
    ).scalar_one()
    if in_use:
        logger.info(f"Billboard {billboard_id} still used by {in_use} categories — delete refused")
        raise ConflictError(
            f"Billboard is used by {in_use} categories. Remove them first.",
            dependents="categories",
            count=in_use,
        )

    await db.delete(billboard)
    await db.flush()
    return billboard

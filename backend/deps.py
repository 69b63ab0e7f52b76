"""
Shared FastAPI dependencies.

Centralizes common dependencies so routers import from a single place
(DB session, store ownership guard, public store lookup, pagination).
"""

from __future__ import annotations

from typing import TypedDict

from fastapi import Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from domain.errors import NotFoundError, PermissionDeniedError
from middleware.auth import require_user
from services import store_service


class Pagination(TypedDict):
    limit: int
    offset: int


def pagination_params(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0, le=100_000),
) -> Pagination:
    return {"limit": limit, "offset": offset}


async def get_existing_store(
    store_id: str = Path(..., min_length=1, description="Store id"),
    db: AsyncSession = Depends(get_db),
) -> Store:
    """Public lookup of the `{store_id}` path store (storefront reads)."""
    store = await store_service.get_store(db, store_id=store_id)
    if not store:
        raise NotFoundError("Store", store_id)
    return store


async def require_store_owner(
    store_id: str = Path(..., min_length=1, description="Store id"),
    user_id: str = Depends(require_user),
    db: AsyncSession = Depends(get_db),
) -> Store:
    """
    Require that the signed-in user owns the `{store_id}` path store.

    An existing store owned by someone else is reported as 403, not 404.
    """
    store = await store_service.get_store(db, store_id=store_id)
    if not store:
        raise NotFoundError("Store", store_id)
    if store.user_id != user_id:
        raise PermissionDeniedError("You do not own this store.")
    return store

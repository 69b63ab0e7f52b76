"""
Store endpoints — create, list, rename and delete the signed-in user's stores.

Endpoints:
    POST   /api/stores              — create a store (store-creation modal)
    GET    /api/stores              — stores owned by the caller
    GET    /api/stores/{store_id}   — one owned store
    PATCH  /api/stores/{store_id}   — rename (settings form)
    DELETE /api/stores/{store_id}   — delete an empty store
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import require_store_owner
from domain.responses import success_response
from middleware.auth import require_user
from models import StoreCreateRequest, StoreResponse, StoreUpdateRequest, serialize
from services import store_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/stores", tags=["stores"])


@router.post("")
async def create_store(
    request: StoreCreateRequest,
    user_id: str = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    store = await store_service.create_store(db, user_id=user_id, name=request.name)
    await db.commit()
    await db.refresh(store)
    return success_response(data=serialize(StoreResponse, store))


@router.get("")
async def list_stores(
    user_id: str = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    stores = await store_service.list_user_stores(db, user_id=user_id)
    return success_response(
        data=[serialize(StoreResponse, s) for s in stores],
        meta={"total": len(stores)},
    )


@router.get("/{store_id}")
async def get_store(store: Store = Depends(require_store_owner)):
    return success_response(data=serialize(StoreResponse, store))


@router.patch("/{store_id}")
async def rename_store(
    request: StoreUpdateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    store = await store_service.rename_store(db, store_id=store.id, name=request.name)
    await db.commit()
    await db.refresh(store)
    return success_response(data=serialize(StoreResponse, store))


@router.delete("/{store_id}")
async def delete_store(
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    deleted = await store_service.delete_store(db, store_id=store.id)
    await db.commit()
    return success_response(data={"id": deleted.id, "message": f"Store '{deleted.name}' deleted"})

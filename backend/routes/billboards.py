"""
Billboard endpoints — public reads for the storefront, owner-only writes
for the dashboard billboard form.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import get_existing_store, require_store_owner
from domain.errors import NotFoundError
from domain.responses import success_response
from models import BillboardCreateRequest, BillboardResponse, BillboardUpdateRequest, serialize
from services import billboard_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/{store_id}/billboards", tags=["billboards"])


@router.post("")
async def create_billboard(
    request: BillboardCreateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    billboard = await billboard_service.create_billboard(
        db,
        store_id=store.id,
        label=request.label,
        image_url=request.image_url,
    )
    await db.commit()
    await db.refresh(billboard)
    return success_response(data=serialize(BillboardResponse, billboard))


@router.get("")
async def list_billboards(
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    billboards = await billboard_service.list_billboards(db, store_id=store.id)
    return success_response(
        data=[serialize(BillboardResponse, b) for b in billboards],
        meta={"total": len(billboards)},
    )


@router.get("/{billboard_id}")
async def get_billboard(
    billboard_id: str,
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    billboard = await billboard_service.get_billboard(db, store_id=store.id, billboard_id=billboard_id)
    if not billboard:
        raise NotFoundError("Billboard", billboard_id, store_id=store.id)
    return success_response(data=serialize(BillboardResponse, billboard))


@router.patch("/{billboard_id}")
async def update_billboard(
    billboard_id: str,
    request: BillboardUpdateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    billboard = await billboard_service.update_billboard(
        db,
        store_id=store.id,
        billboard_id=billboard_id,
        label=request.label,
        image_url=request.image_url,
    )
    await db.commit()
    await db.refresh(billboard)
    return success_response(data=serialize(BillboardResponse, billboard))


@router.delete("/{billboard_id}")
async def delete_billboard(
    billboard_id: str,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    billboard = await billboard_service.delete_billboard(db, store_id=store.id, billboard_id=billboard_id)
    await db.commit()
    return success_response(data={"id": billboard.id, "message": f"Billboard '{billboard.label}' deleted"})

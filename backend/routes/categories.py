"""
Category endpoints — public reads, owner-only writes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import get_existing_store, require_store_owner
from domain.errors import NotFoundError
from domain.responses import success_response
from models import CategoryCreateRequest, CategoryResponse, CategoryUpdateRequest, serialize
from services import category_service

router = APIRouter(prefix="/api/{store_id}/categories", tags=["categories"])


@router.post("")
async def create_category(
    request: CategoryCreateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.create_category(
        db,
        store_id=store.id,
        name=request.name,
        billboard_id=request.billboard_id,
    )
    await db.commit()
    await db.refresh(category)
    return success_response(data=serialize(CategoryResponse, category))


@router.get("")
async def list_categories(
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    categories = await category_service.list_categories(db, store_id=store.id)
    return success_response(
        data=[serialize(CategoryResponse, c) for c in categories],
        meta={"total": len(categories)},
    )


@router.get("/{category_id}")
async def get_category(
    category_id: str,
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.get_category(db, store_id=store.id, category_id=category_id)
    if not category:
        raise NotFoundError("Category", category_id, store_id=store.id)
    return success_response(data=serialize(CategoryResponse, category))


@router.patch("/{category_id}")
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.update_category(
        db,
        store_id=store.id,
        category_id=category_id,
        name=request.name,
        billboard_id=request.billboard_id,
    )
    await db.commit()
    await db.refresh(category)
    return success_response(data=serialize(CategoryResponse, category))


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.delete_category(db, store_id=store.id, category_id=category_id)
    await db.commit()
    return success_response(data={"id": category.id, "message": f"Category '{category.name}' deleted"})

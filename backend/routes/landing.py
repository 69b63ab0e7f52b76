"""
Dashboard landing redirect.

    GET /setup
        anonymous          → 307 to the sign-in page
        owns a store       → 307 to /<store_id>
        no store yet       → 200 {"showStoreModal": true}
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from domain.responses import success_response
from middleware.auth import get_authenticated_user
from services import store_service

router = APIRouter(tags=["setup"])


@router.get("/setup")
async def setup_landing(
    user_id: Optional[str] = Depends(get_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    path = await store_service.resolve_landing_path(db, user_id=user_id)
    if path:
        return RedirectResponse(url=path, status_code=307)
    return success_response(data={"showStoreModal": True})

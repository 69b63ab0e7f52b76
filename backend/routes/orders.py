"""
Order endpoints — the dashboard orders table (store owner only).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import Pagination, pagination_params, require_store_owner
from domain.responses import paginated_response
from models import OrderSummary
from services import order_service

router = APIRouter(prefix="/api/{store_id}/orders", tags=["orders"])


@router.get("")
async def list_orders(
    page: Pagination = Depends(pagination_params),
    store: Store = Depends(require_store_owner),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, with comma-joined product names and the order total."""
    rows, total = await order_service.list_store_orders(
        db,
        store_id=store.id,
        limit=page["limit"],
        offset=page["offset"],
    )
    return paginated_response(
        items=[OrderSummary(**row).model_dump(by_alias=True, mode="json") for row in rows],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )

"""
Checkout endpoint — called by the public storefront cart.

POST /api/{store_id}/checkout  {"productIds": [...]}  →  {"url": <hosted checkout>}

Creates an unpaid order, then a Stripe checkout session whose metadata
carries the order id. The order is committed only once Stripe accepted the
session.
"""
import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import Store
from deps import get_existing_store
from exceptions import CheckoutUnavailableError
from models import CheckoutRequest, CheckoutResponse
from services import order_service, stripe_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/{store_id}", tags=["checkout"])


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    request: CheckoutRequest,
    store: Store = Depends(get_existing_store),
    db: AsyncSession = Depends(get_db),
):
    order, products = await order_service.create_checkout_order(
        db,
        store_id=store.id,
        product_ids=request.product_ids,
    )

    try:
        url = await stripe_service.create_checkout_session(order_id=order.id, products=products)
    except CheckoutUnavailableError as e:
        logger.error(f"  ❌ Checkout unavailable: {e}")
        raise HTTPException(status_code=503, detail="Checkout is not configured.")
    except stripe.StripeError as e:
        # Don't leak Stripe error details to the storefront
        logger.error(f"  ❌ Stripe checkout session failed for order {order.id}: {e}")
        raise HTTPException(status_code=502, detail="Checkout session could not be created. Check server logs.")

    await db.commit()
    return CheckoutResponse(url=url)

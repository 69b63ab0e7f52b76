"""
Order service — checkout orders and their settlement.

Handles:
    1. Checkout: create an unpaid order with one item per product
    2. Settlement: apply a verified "checkout.session.completed" event
       (mark paid, store address/phone, archive sold products)
    3. Dashboard listing of a store's orders

Settlement writes (order update, product archive, processed-event record)
share one transaction, so a failure part-way leaves nothing behind and
Stripe's redelivery starts from a clean state.
"""
import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from db_models import Order, OrderItem, ProcessedWebhookEvent, Product
from domain.constants import ADDRESS_COMPONENTS
from domain.errors import ValidationError
from domain.events import CheckoutSessionCompletedEvent, CustomerAddress
from exceptions import OrderNotFoundError

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
# Checkout
# ════════════════════════════════════════════════════════════════════


async def create_checkout_order(
    db: AsyncSession,
    *,
    store_id: str,
    product_ids: list[str],
) -> tuple[Order, list[Product]]:
    """
    Create an unpaid order for the given products.

    Every id must be a non-archived product of the store. Duplicate ids
    are collapsed; each product is bought once.
    """
    wanted = list(dict.fromkeys(product_ids))
    if not wanted:
        raise ValidationError("Product ids are required")

    res = await db.execute(
        select(Product).where(
            Product.store_id == store_id,
            Product.id.in_(wanted),
            Product.is_archived == False,  # noqa: E712
        )
    )
    found = {p.id: p for p in res.scalars().all()}
    missing = [pid for pid in wanted if pid not in found]
    if missing:
        raise ValidationError(
            "Some products are unavailable",
            field="productIds",
            details={"unavailable": missing},
        )

    products = [found[pid] for pid in wanted]
    order = Order(store_id=store_id, is_paid=False)
    db.add(order)
    await db.flush()

    for product in products:
        db.add(OrderItem(order_id=order.id, product_id=product.id))
    await db.flush()

    logger.info(f"Order {order.id} created in store {store_id} with {len(products)} items")
    return order, products


# ════════════════════════════════════════════════════════════════════
# Settlement
# ════════════════════════════════════════════════════════════════════


def format_shipping_address(address: Optional[CustomerAddress]) -> str:
    """
    Join the address components into one display line.

    Components are kept in line1, line2, city, state, postal_code, country
    order; missing or empty ones are dropped.
    """
    if address is None:
        return ""
    parts = [getattr(address, name) for name in ADDRESS_COMPONENTS]
    return ", ".join(part for part in parts if part)


async def is_event_processed(db: AsyncSession, event_id: str) -> bool:
    res = await db.execute(
        select(ProcessedWebhookEvent.id).where(ProcessedWebhookEvent.event_id == event_id)
    )
    return res.scalar_one_or_none() is not None


async def finalize_checkout(db: AsyncSession, event: CheckoutSessionCompletedEvent) -> Optional[Order]:
    """
    Apply a completed checkout session to its order.

    Returns the updated order, or None when the event id was already
    applied (redelivery).

    Raises:
        OrderNotFoundError: the session metadata names an unknown order.
    """
    if await is_event_processed(db, event.id):
        logger.info(f"  ↩️  Stripe event {event.id} already processed — skipping")
        return None

    order_id = event.order_id
    res = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items))
        .execution_options(populate_existing=True)
    )
    order = res.scalar_one_or_none()
    if order is None:
        raise OrderNotFoundError(order_id)

    details = event.session.customer_details
    order.is_paid = True
    order.address = format_shipping_address(details.address if details else None)
    order.phone = (details.phone if details else None) or ""

    product_ids = sorted({item.product_id for item in order.items})
    if product_ids:
        await db.execute(
            update(Product)
            .where(Product.id.in_(product_ids))
            .values(is_archived=True)
        )

    db.add(ProcessedWebhookEvent(event_id=event.id, event_type=event.type, order_id=order.id))

    try:
        await db.commit()
    except IntegrityError:
        # A concurrent delivery of the same event committed first
        await db.rollback()
        logger.info(f"  ↩️  Stripe event {event.id} committed by a concurrent delivery")
        return None

    logger.info(
        f"  ✅ Order {order.id} paid — archived {len(product_ids)} products "
        f"(event {event.id})"
    )
    return order


# ════════════════════════════════════════════════════════════════════
# Dashboard Listing
# ════════════════════════════════════════════════════════════════════


async def list_store_orders(
    db: AsyncSession,
    *,
    store_id: str,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[dict], int]:
    """Orders for the dashboard table, newest first, with product names and total."""
    total = (
        await db.execute(select(func.count()).select_from(Order).where(Order.store_id == store_id))
    ).scalar_one()

    res = await db.execute(
        select(Order)
        .where(Order.store_id == store_id)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .execution_options(populate_existing=True)
        .order_by(Order.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    orders = res.scalars().all()

    rows = []
    for order in orders:
        products = [item.product for item in order.items]
        rows.append({
            "id": order.id,
            "phone": order.phone,
            "address": order.address,
            "products": ", ".join(p.name for p in products),
            "total_price": round(sum(p.price for p in products), 2),
            "is_paid": order.is_paid,
            "created_at": order.created_at,
        })
    return rows, total

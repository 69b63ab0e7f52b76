"""
Stripe webhook endpoint.

    POST /api/webhook

Answers:
    400 text/plain "Webhook Error: <reason>"  — bad signature or payload (nothing written)
    200 empty body                            — event applied, already applied, or ignored

Anything raised while applying an event (e.g. the order does not exist) is
left to the catch-all handler, so Stripe sees a 500 and redelivers later.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from domain.constants import STRIPE_SIGNATURE_HEADER
from domain.events import CheckoutSessionCompletedEvent, parse_event
from exceptions import WebhookVerificationError
from services import order_service, stripe_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhook"])


def _reject(reason: str) -> PlainTextResponse:
    return PlainTextResponse(f"Webhook Error: {reason}", status_code=400)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    body = await request.body()
    signature = request.headers.get(STRIPE_SIGNATURE_HEADER)

    try:
        stripe_service.verify_webhook_signature(body, signature)
    except WebhookVerificationError as e:
        return _reject(str(e))

    try:
        event = parse_event(body)
    except ValueError as e:
        logger.warning(f"  Verified webhook with unusable payload: {e}")
        return _reject(f"Invalid event payload: {e}")

    logger.info(f"  📩 Stripe webhook: {event.type} ({event.id})")

    if isinstance(event, CheckoutSessionCompletedEvent):
        await order_service.finalize_checkout(db, event)
    else:
        logger.debug(f"  Stripe event type ignored: {event.type}")

    return Response(status_code=200)

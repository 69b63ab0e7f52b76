"""
Stripe service — thin wrapper around the stripe SDK.

Keeps stripe usage out of routes:
    1. Webhook signature verification (fails closed without a secret)
    2. Hosted checkout session creation
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

import stripe

from config import settings
from db_models import Product
from domain.constants import CHECKOUT_METADATA_ORDER_ID
from exceptions import CheckoutUnavailableError, WebhookVerificationError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
# Webhook Verification
# ════════════════════════════════════════════════════════════════════


def verify_webhook_signature(payload: bytes, signature: str | None) -> None:
    """
    Verify the Stripe-Signature header for a raw webhook body.

    Stripe signs "<timestamp>.<body>" with HMAC-SHA256 using the endpoint
    secret; the SDK also rejects timestamps older than the tolerance.

    Raises:
        WebhookVerificationError: secret not configured, header missing,
            or signature/timestamp invalid.
    """
    if not settings.stripe_webhook_secret:
        logger.error(
            "STRIPE_WEBHOOK_SECRET not configured — rejecting webhook. "
            "Set STRIPE_WEBHOOK_SECRET in .env to accept Stripe webhooks."
        )
        raise WebhookVerificationError("Webhook secret not configured")

    if not signature:
        logger.warning("Webhook received without signature header")
        raise WebhookVerificationError("Missing Stripe-Signature header")

    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise WebhookVerificationError("Payload is not valid UTF-8") from e

    try:
        stripe.WebhookSignature.verify_header(
            body,
            signature,
            settings.stripe_webhook_secret,
            settings.stripe_webhook_tolerance_seconds,
        )
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Webhook signature rejected: {e.user_message or e}")
        raise WebhookVerificationError(e.user_message or str(e)) from e


# ════════════════════════════════════════════════════════════════════
# Checkout Sessions
# ════════════════════════════════════════════════════════════════════


def to_minor_units(price: float) -> int:
    """Dollars → cents. Decimal avoids float artefacts like 19.99 * 100 = 1998.999…"""
    return int((Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_line_items(products: Iterable[Product]) -> list[dict]:
    """One line item (quantity 1) per product."""
    currency = settings.checkout_currency.lower()
    return [
        {
            "quantity": 1,
            "price_data": {
                "currency": currency,
                "product_data": {"name": product.name},
                "unit_amount": to_minor_units(product.price),
            },
        }
        for product in products
    ]


async def create_checkout_session(*, order_id: str, products: list[Product]) -> str:
    """
    Create a hosted checkout session for an order and return its URL.

    The order id travels in the session metadata so the webhook can find
    the order once payment completes.
    """
    if not settings.stripe_api_key:
        raise CheckoutUnavailableError("STRIPE_API_KEY not configured")

    session = await run_blocking(
        stripe.checkout.Session.create,
        api_key=settings.stripe_api_key,
        line_items=build_line_items(products),
        mode="payment",
        billing_address_collection="required",
        phone_number_collection={"enabled": True},
        success_url=settings.checkout_success_url,
        cancel_url=settings.checkout_cancel_url,
        metadata={CHECKOUT_METADATA_ORDER_ID: order_id},
    )

    logger.info(f"  💳 Checkout session {session.id} created for order {order_id} ({len(products)} items)")
    return session.url

"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class StripeEventType(str, Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"

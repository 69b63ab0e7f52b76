"""
Custom exception classes for payment and order processing.

These are deliberately NOT HTTPExceptions: routes decide how to answer,
and anything left unhandled reaches the catch-all handler in main.py.
"""


class WebhookVerificationError(Exception):
    """Raised when a webhook payload cannot be trusted (bad or missing signature)."""
    pass


class OrderNotFoundError(Exception):
    """Raised when a paid checkout session references an unknown order."""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class CheckoutUnavailableError(Exception):
    """Raised when a checkout session cannot be created (Stripe not configured)."""
    pass

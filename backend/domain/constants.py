"""
Domain constants used across services/routers and the dashboard forms.
"""

# Key under checkout session metadata that carries our order id
CHECKOUT_METADATA_ORDER_ID = "orderId"

# Header Stripe uses for the webhook signature
STRIPE_SIGNATURE_HEADER = "Stripe-Signature"

# Shipping address components, in display order
ADDRESS_COMPONENTS = ("line1", "line2", "city", "state", "postal_code", "country")

# Dashboard notifications
GENERIC_ERROR_MESSAGE = "Something went wrong."

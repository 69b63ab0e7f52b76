"""
Typed Stripe webhook events.

The raw event body is parsed once, at the webhook boundary, into one of two
variants:

    CheckoutSessionCompletedEvent  — "checkout.session.completed"
    IgnoredEvent                   — every other event type (no-op)

Only the fields this service reads are modelled; everything else in the
Stripe payload is ignored.
"""
import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

from domain.constants import CHECKOUT_METADATA_ORDER_ID
from domain.enums import StripeEventType


class _StripeObject(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CustomerAddress(_StripeObject):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class CustomerDetails(_StripeObject):
    address: Optional[CustomerAddress] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None


class CheckoutMetadata(_StripeObject):
    order_id: str = Field(..., alias=CHECKOUT_METADATA_ORDER_ID, min_length=1)


class CheckoutSession(_StripeObject):
    id: str
    metadata: CheckoutMetadata
    customer_details: Optional[CustomerDetails] = None


class CheckoutSessionData(_StripeObject):
    object: CheckoutSession


class CheckoutSessionCompletedEvent(_StripeObject):
    id: str
    type: Literal["checkout.session.completed"]
    data: CheckoutSessionData

    @property
    def session(self) -> CheckoutSession:
        return self.data.object

    @property
    def order_id(self) -> str:
        return self.data.object.metadata.order_id


class IgnoredEvent(_StripeObject):
    """Any event type this service does not act on."""
    id: str
    type: str


def _event_tag(value: Any) -> str:
    event_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if event_type == StripeEventType.CHECKOUT_SESSION_COMPLETED.value:
        return "checkout_completed"
    return "ignored"


WebhookEvent = Annotated[
    Union[
        Annotated[CheckoutSessionCompletedEvent, Tag("checkout_completed")],
        Annotated[IgnoredEvent, Tag("ignored")],
    ],
    Discriminator(_event_tag),
]

_event_adapter = TypeAdapter(WebhookEvent)


def parse_event(payload: bytes | str) -> Union[CheckoutSessionCompletedEvent, IgnoredEvent]:
    """
    Parse a verified webhook body into its event variant.

    Raises:
        ValueError: malformed JSON, or a known event type missing a required
            field (pydantic.ValidationError is a ValueError subclass).
    """
    raw = json.loads(payload)
    if not isinstance(raw, dict):
        raise ValueError("Event payload must be a JSON object")
    return _event_adapter.validate_python(raw)

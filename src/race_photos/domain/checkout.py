"""Domain models for checkout sessions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckoutLineItem:
    """Single purchasable photo in a checkout session.

    Amounts are in minor currency units. ``application_fee_amount`` is the
    platform share of this item; only the aggregate fee on the payment intent
    is sent to the payment provider.
    """

    photo_id: str
    name: str
    unit_amount: int
    application_fee_amount: int


@dataclass(frozen=True)
class CheckoutRequest:
    """Everything the payment provider needs to open a hosted checkout."""

    line_items: list[CheckoutLineItem]
    currency: str
    application_fee_amount: int
    destination_account_id: str
    metadata: dict[str, str]
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class CheckoutSession:
    """Hosted checkout session created by the payment provider."""

    id: str
    url: str

"""Domain models for completed purchases."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class NewPurchase:
    """Purchase row to insert after a confirmed payment."""

    photo_id: str
    buyer_id: str
    amount: Decimal
    stripe_payment_intent: str


@dataclass(frozen=True)
class PurchaseRecord:
    """Stored purchase with the purchased photo's details."""

    id: str
    photo_id: str
    amount: Decimal
    created_at: datetime | None
    event_name: str | None
    url: str | None

"""Payment provider webhook events handled by the marketplace."""

from dataclasses import dataclass

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
ACCOUNT_UPDATED = "account.updated"


@dataclass(frozen=True)
class CheckoutSessionCompleted:
    """A buyer finished paying for a checkout session."""

    session_id: str
    user_id: str
    photo_ids: list[str]
    amount_total: int
    payment_intent: str


@dataclass(frozen=True)
class AccountUpdated:
    """A connected account changed, e.g. finished onboarding."""

    account_id: str
    user_id: str | None
    charges_enabled: bool


@dataclass(frozen=True)
class IgnoredEvent:
    """Any event type the marketplace does not act on."""

    type: str


WebhookEvent = CheckoutSessionCompleted | AccountUpdated | IgnoredEvent

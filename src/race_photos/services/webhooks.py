"""Reconciliation of payment provider webhook events."""

import logging
from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.events import (
    ACCOUNT_UPDATED,
    CHECKOUT_SESSION_COMPLETED,
    AccountUpdated,
    CheckoutSessionCompleted,
    IgnoredEvent,
    WebhookEvent,
)
from race_photos.domain.profiles import AccountStatus
from race_photos.domain.purchases import NewPurchase
from race_photos.services.pricing import split_minor_amount, to_major_units
from race_photos.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)


class WebhookVerifier(Protocol):
    """Checks webhook signatures and decodes the event payload."""

    def verify_event(self, payload: bytes, signature: str | None) -> dict[str, object]:
        """Return the decoded event or raise ``VerificationFailed``."""


class PurchaseRepository(Protocol):
    """Persistence interface for purchases written by the webhook."""

    def list_recorded_photo_ids(self, payment_intent: str) -> set[str]:
        """Return photo ids already purchased under a payment intent."""

    def insert_purchases(self, purchases: list[NewPurchase]) -> None:
        """Insert purchase rows, ignoring ones that already exist."""


def parse_event(event: dict[str, object]) -> WebhookEvent:
    """Map a raw provider event to one of the handled event kinds."""
    event_type = str(event.get("type", ""))
    data = event.get("data")
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        return IgnoredEvent(type=event_type)

    metadata = obj.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}

    if event_type == CHECKOUT_SESSION_COMPLETED:
        user_id = metadata.get("user_id")
        raw_photo_ids = metadata.get("photo_ids")
        payment_intent = _object_id(obj.get("payment_intent"))
        if not user_id or not raw_photo_ids or not payment_intent:
            logger.warning(
                "Completed session without marketplace metadata",
                extra={"session_id": obj.get("id")},
            )
            return IgnoredEvent(type=event_type)
        return CheckoutSessionCompleted(
            session_id=str(obj.get("id", "")),
            user_id=str(user_id),
            photo_ids=[
                photo_id.strip()
                for photo_id in str(raw_photo_ids).split(",")
                if photo_id.strip()
            ],
            amount_total=int(obj.get("amount_total") or 0),
            payment_intent=payment_intent,
        )

    if event_type == ACCOUNT_UPDATED:
        user_id = metadata.get("user_id")
        return AccountUpdated(
            account_id=str(obj.get("id", "")),
            user_id=str(user_id) if user_id else None,
            charges_enabled=bool(obj.get("charges_enabled")),
        )

    return IgnoredEvent(type=event_type)


def _object_id(value: object) -> str | None:
    """Return the id of a possibly expanded provider object reference."""
    if isinstance(value, dict):
        value = value.get("id")
    return str(value) if value else None


@dataclass
class WebhookService:
    """Verifies webhook deliveries and applies them to the store."""

    verifier: WebhookVerifier
    purchase_repository: PurchaseRepository
    profile_repository: ProfileRepository

    def handle(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """Verify, parse and apply a single webhook delivery."""
        event = parse_event(self.verifier.verify_event(payload, signature))
        if isinstance(event, CheckoutSessionCompleted):
            self.record_purchases(event)
        elif isinstance(event, AccountUpdated):
            self.sync_account(event)
        else:
            logger.info("Ignoring webhook event", extra={"event_type": event.type})
        return event

    def record_purchases(self, event: CheckoutSessionCompleted) -> list[NewPurchase]:
        """Insert one purchase per photo; redelivered events insert nothing new."""
        shares = split_minor_amount(event.amount_total, len(event.photo_ids))
        recorded = self.purchase_repository.list_recorded_photo_ids(
            event.payment_intent
        )
        purchases = [
            NewPurchase(
                photo_id=photo_id,
                buyer_id=event.user_id,
                amount=to_major_units(share),
                stripe_payment_intent=event.payment_intent,
            )
            for photo_id, share in zip(event.photo_ids, shares, strict=True)
            if photo_id not in recorded
        ]
        if purchases:
            self.purchase_repository.insert_purchases(purchases)
        logger.info(
            "Recorded purchases",
            extra={
                "session_id": event.session_id,
                "inserted": len(purchases),
                "skipped": len(event.photo_ids) - len(purchases),
            },
        )
        return purchases

    def sync_account(self, event: AccountUpdated) -> None:
        """Mirror a connected account's charge capability onto its profile."""
        if not event.user_id:
            return
        status = (
            AccountStatus.ACTIVE if event.charges_enabled else AccountStatus.PENDING
        )
        self.profile_repository.update_stripe_account(
            event.user_id, event.account_id, status
        )

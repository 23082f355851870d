"""Checkout session creation with a platform fee split."""

import logging
from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.cart import Cart
from race_photos.domain.checkout import (
    CheckoutLineItem,
    CheckoutRequest,
    CheckoutSession,
)
from race_photos.domain.photos import CheckoutPhoto
from race_photos.domain.profiles import AuthUser
from race_photos.errors import BadRequest
from race_photos.services.pricing import aggregate_fee, item_fee, to_minor_units

logger = logging.getLogger(__name__)

SUCCESS_PATH = "/profile?session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/gallery"


class CheckoutPhotoRepository(Protocol):
    """Read access to photo prices and photographer accounts."""

    def get_checkout_photos(self, photo_ids: list[str]) -> list[CheckoutPhoto]:
        """Return photos with their photographer's connected account id."""


class CheckoutGateway(Protocol):
    """Payment provider operations needed for checkout."""

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Create a hosted checkout session and return it."""


@dataclass
class CheckoutService:
    """Builds priced line items and opens a hosted checkout session."""

    photo_repository: CheckoutPhotoRepository
    gateway: CheckoutGateway
    base_url: str
    currency: str = "usd"
    fee_percent: int = 10

    def create_session(self, user: AuthUser, photo_ids: list[str]) -> CheckoutSession:
        """Create a checkout session for the given photos on behalf of ``user``."""
        requested = _normalize_photo_ids(photo_ids)
        photos = self._load_photos(requested)

        cart = Cart()
        for photo in photos:
            cart.add(photo.id, photo.price)

        destination = self._destination_account(photos)
        request = CheckoutRequest(
            line_items=[self.build_line_item(photo) for photo in photos],
            currency=self.currency,
            application_fee_amount=aggregate_fee(
                [item.price for item in cart.items], self.fee_percent
            ),
            destination_account_id=destination,
            metadata={"user_id": user.id, "photo_ids": ",".join(cart.photo_ids())},
            success_url=f"{self.base_url}{SUCCESS_PATH}",
            cancel_url=f"{self.base_url}{CANCEL_PATH}",
        )
        session = self.gateway.create_checkout_session(request)
        logger.info(
            "Created checkout session",
            extra={"session_id": session.id, "user_id": user.id},
        )
        return session

    def build_line_item(self, photo: CheckoutPhoto) -> CheckoutLineItem:
        """Price a single photo in minor units."""
        return CheckoutLineItem(
            photo_id=photo.id,
            name=f"Race Photo #{photo.id}",
            unit_amount=to_minor_units(photo.price),
            application_fee_amount=item_fee(photo.price, self.fee_percent),
        )

    def _load_photos(self, photo_ids: list[str]) -> list[CheckoutPhoto]:
        try:
            rows = self.photo_repository.get_checkout_photos(photo_ids)
        except Exception as exc:
            logger.exception("Failed to fetch photo data")
            raise BadRequest("Failed to fetch photo data") from exc
        by_id = {photo.id: photo for photo in rows}
        missing = [photo_id for photo_id in photo_ids if photo_id not in by_id]
        if not rows or missing:
            raise BadRequest("Failed to fetch photo data")
        return [by_id[photo_id] for photo_id in photo_ids]

    def _destination_account(self, photos: list[CheckoutPhoto]) -> str:
        # The first photo's photographer receives the whole transfer.
        accounts = {photo.stripe_account_id for photo in photos}
        if len(accounts) > 1:
            logger.warning(
                "Cart spans several photographers; transfer goes to the first",
                extra={"photographer_id": photos[0].photographer_id},
            )
        destination = photos[0].stripe_account_id
        if not destination:
            raise BadRequest("Photographer cannot accept payments yet")
        return destination


def _normalize_photo_ids(photo_ids: list[str]) -> list[str]:
    """Drop duplicates and reject ids that cannot be comma-joined."""
    normalized: list[str] = []
    for raw in photo_ids:
        photo_id = raw.strip()
        if not photo_id or "," in photo_id:
            raise BadRequest("Invalid photo id")
        if photo_id not in normalized:
            normalized.append(photo_id)
    if not normalized:
        raise BadRequest("No photos requested")
    return normalized

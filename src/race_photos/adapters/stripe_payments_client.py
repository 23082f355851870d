"""Stripe adapter for checkout, Connect onboarding and webhooks."""

import json
from dataclasses import dataclass

import stripe

from race_photos.domain.checkout import CheckoutRequest, CheckoutSession
from race_photos.errors import VerificationFailed
from race_photos.services.checkout import CheckoutGateway
from race_photos.services.connect import ConnectGateway
from race_photos.services.webhooks import WebhookVerifier


@dataclass
class StripePaymentsClient(CheckoutGateway, ConnectGateway, WebhookVerifier):
    """Payment gateway backed by the Stripe API.

    The API key is passed on every call so no global ``stripe.api_key`` is set.
    """

    api_key: str
    webhook_secret: str
    tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Create a Checkout Session that transfers funds to a connected account."""
        session = stripe.checkout.Session.create(
            api_key=self.api_key,
            payment_method_types=["card"],
            mode="payment",
            line_items=[
                {
                    "price_data": {
                        "currency": request.currency,
                        "product_data": {"name": item.name},
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": 1,
                }
                for item in request.line_items
            ],
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            payment_intent_data={
                "application_fee_amount": request.application_fee_amount,
                "transfer_data": {"destination": request.destination_account_id},
            },
            metadata=request.metadata,
        )
        return CheckoutSession(id=session.id, url=session.url)

    def create_connected_account(
        self, *, email: str | None, user_id: str, idempotency_key: str
    ) -> str:
        """Create an Express connected account tagged with the user id."""
        params: dict[str, object] = {
            "type": "express",
            "metadata": {"user_id": user_id},
        }
        if email:
            params["email"] = email
        account = stripe.Account.create(
            api_key=self.api_key,
            idempotency_key=idempotency_key,
            **params,
        )
        return account.id

    def create_onboarding_link(
        self, *, account_id: str, refresh_url: str, return_url: str
    ) -> str:
        """Create an account onboarding link."""
        link = stripe.AccountLink.create(
            api_key=self.api_key,
            account=account_id,
            refresh_url=refresh_url,
            return_url=return_url,
            type="account_onboarding",
        )
        return link.url

    def verify_event(self, payload: bytes, signature: str | None) -> dict[str, object]:
        """Verify the ``stripe-signature`` header, then decode the payload."""
        if not signature:
            raise VerificationFailed()
        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self.webhook_secret, self.tolerance
            )
            event = json.loads(body)
        except (stripe.SignatureVerificationError, ValueError) as exc:
            raise VerificationFailed() from exc
        if not isinstance(event, dict):
            raise VerificationFailed()
        return event

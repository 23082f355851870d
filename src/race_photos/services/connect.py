"""Connected payment account provisioning for photographers."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.profiles import AuthUser
from race_photos.errors import BadRequest
from race_photos.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)

ONBOARDING_PATH = "/profile"


class ConnectGateway(Protocol):
    """Payment provider operations for connected accounts."""

    def create_connected_account(
        self, *, email: str | None, user_id: str, idempotency_key: str
    ) -> str:
        """Create a connected account and return its id."""

    def create_onboarding_link(
        self, *, account_id: str, refresh_url: str, return_url: str
    ) -> str:
        """Create an onboarding link for the account and return its url."""


@dataclass
class ConnectService:
    """Ensures each photographer has exactly one connected account."""

    profile_repository: ProfileRepository
    gateway: ConnectGateway
    base_url: str

    def ensure_onboarding_link(self, user: AuthUser) -> str:
        """Provision the user's connected account if needed and return a link."""
        profile = self.profile_repository.get_profile(user.id)
        if profile is None:
            raise BadRequest("Profile not found")

        account_id = profile.stripe_account_id
        if not account_id:
            # A retry after a crash below returns the same provider account.
            account_id = self.gateway.create_connected_account(
                email=user.email,
                user_id=user.id,
                idempotency_key=account_idempotency_key(user),
            )
            self.profile_repository.set_stripe_account(user.id, account_id)
            logger.info(
                "Created connected account",
                extra={"user_id": user.id, "account_id": account_id},
            )

        onboarding_url = f"{self.base_url}{ONBOARDING_PATH}"
        return self.gateway.create_onboarding_link(
            account_id=account_id,
            refresh_url=onboarding_url,
            return_url=onboarding_url,
        )


def account_idempotency_key(user: AuthUser) -> str:
    """Key that is stable per user and email.

    Stripe rejects a reused key sent with different parameters, so a changed
    email needs a fresh key.
    """
    email_digest = hashlib.sha256((user.email or "").encode("utf-8")).hexdigest()
    return f"connect-account-{user.id}-{email_digest[:16]}"

"""Profile lookup and bootstrap."""

from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.profiles import AccountStatus, AuthUser, Profile

DEFAULT_USERNAME = "user"


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile for a user id, if present."""

    def create_profile(self, user_id: str, username: str) -> Profile:
        """Create and return a new profile."""

    def set_stripe_account(self, user_id: str, account_id: str) -> None:
        """Attach a connected account id to the profile."""

    def update_stripe_account(
        self, user_id: str, account_id: str, status: AccountStatus
    ) -> None:
        """Store a connected account id together with its status."""


@dataclass
class ProfileService:
    """Application service for profile lifecycle actions."""

    repository: ProfileRepository

    def ensure_profile(self, user: AuthUser) -> Profile:
        """Return the user's profile, creating it on first access."""
        existing = self.repository.get_profile(user.id)
        if existing:
            return existing
        return self.repository.create_profile(user.id, default_username(user.email))


def default_username(email: str | None) -> str:
    """Derive a username from the local part of an email address."""
    if not email:
        return DEFAULT_USERNAME
    local_part = email.split("@", maxsplit=1)[0].strip()
    return local_part or DEFAULT_USERNAME

"""Supabase auth-backed identity provider."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from race_photos.domain.profiles import AuthUser
from race_photos.services.auth import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolves access tokens with Supabase auth."""

    client: Client

    def get_user(self, token: str) -> AuthUser | None:
        """Return the user for an access token, or None when rejected."""
        try:
            response = self.client.auth.get_user(token)
        except AuthError:
            logger.info("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return AuthUser(id=str(response.user.id), email=response.user.email)

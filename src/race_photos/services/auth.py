"""Bearer token parsing and user resolution."""

from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.profiles import AuthUser
from race_photos.errors import Unauthorized

_BEARER_SCHEME = "bearer"


class IdentityProvider(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user(self, token: str) -> AuthUser | None:
        """Return the user owning the token, or None when it is invalid."""


def parse_bearer_token(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != _BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


@dataclass
class AuthService:
    """Authenticates requests against the identity provider."""

    identity_provider: IdentityProvider

    def authenticate(self, authorization: str | None) -> AuthUser:
        """Return the caller's identity or raise ``Unauthorized``."""
        token = parse_bearer_token(authorization)
        if token is None:
            raise Unauthorized()
        user = self.identity_provider.get_user(token)
        if user is None:
            raise Unauthorized()
        return user

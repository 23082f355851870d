"""Domain models for users and photographer profiles."""

from dataclasses import dataclass
from enum import Enum


class AccountStatus(str, Enum):
    """Onboarding state of a connected payment account."""

    PENDING = "pending"
    ACTIVE = "active"


@dataclass(frozen=True)
class AuthUser:
    """Identity resolved from a bearer token."""

    id: str
    email: str | None


@dataclass(frozen=True)
class Profile:
    """Represents a row of the profiles table."""

    id: str
    username: str
    stripe_account_id: str | None = None
    stripe_account_status: AccountStatus | None = None

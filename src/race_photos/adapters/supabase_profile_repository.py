"""Supabase-backed profile repository."""

from dataclasses import dataclass

from supabase import Client

from race_photos.domain.profiles import AccountStatus, Profile
from race_photos.services.profiles import ProfileRepository

_PROFILE_COLUMNS = "id, username, stripe_account_id, stripe_account_status"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile for a user id, if present."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_profile(response.data[0])
        return None

    def create_profile(self, user_id: str, username: str) -> Profile:
        """Create a new profile row and return it."""
        response = (
            self.client.table("profiles")
            .insert({"id": user_id, "username": username})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return _to_profile(response.data[0])

    def set_stripe_account(self, user_id: str, account_id: str) -> None:
        """Attach a connected account id to the profile."""
        self.client.table("profiles").update({"stripe_account_id": account_id}).eq(
            "id", user_id
        ).execute()

    def update_stripe_account(
        self, user_id: str, account_id: str, status: AccountStatus
    ) -> None:
        """Store the connected account id and its onboarding status."""
        self.client.table("profiles").update(
            {"stripe_account_id": account_id, "stripe_account_status": status.value}
        ).eq("id", user_id).execute()


def _to_profile(row: dict[str, object]) -> Profile:
    status = row.get("stripe_account_status")
    return Profile(
        id=str(row["id"]),
        username=str(row.get("username") or ""),
        stripe_account_id=row.get("stripe_account_id") or None,
        stripe_account_status=AccountStatus(status) if status else None,
    )

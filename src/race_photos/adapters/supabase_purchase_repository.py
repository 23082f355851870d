"""Supabase-backed purchase repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from race_photos.domain.purchases import NewPurchase, PurchaseRecord
from race_photos.services.gallery import PurchaseHistoryRepository
from race_photos.services.pricing import to_decimal
from race_photos.services.webhooks import PurchaseRepository

PURCHASE_CONFLICT_COLUMNS = "photo_id,stripe_payment_intent"


@dataclass
class SupabasePurchaseRepository(PurchaseRepository, PurchaseHistoryRepository):
    """Supabase implementation for purchase persistence."""

    client: Client

    def list_recorded_photo_ids(self, payment_intent: str) -> set[str]:
        """Return photo ids already purchased under a payment intent."""
        response = (
            self.client.table("purchases")
            .select("photo_id")
            .eq("stripe_payment_intent", payment_intent)
            .execute()
        )
        return {str(row["photo_id"]) for row in response.data or []}

    def insert_purchases(self, purchases: list[NewPurchase]) -> None:
        """Insert purchases, skipping rows that already exist."""
        self.client.table("purchases").upsert(
            [
                {
                    "photo_id": purchase.photo_id,
                    "buyer_id": purchase.buyer_id,
                    "amount": str(purchase.amount),
                    "stripe_payment_intent": purchase.stripe_payment_intent,
                }
                for purchase in purchases
            ],
            on_conflict=PURCHASE_CONFLICT_COLUMNS,
            ignore_duplicates=True,
        ).execute()

    def list_purchases_for_buyer(self, buyer_id: str) -> list[PurchaseRecord]:
        """Return a buyer's purchases, newest first."""
        response = (
            self.client.table("purchases")
            .select("id, photo_id, amount, created_at, photo:photos(event_name, url)")
            .eq("buyer_id", buyer_id)
            .order("created_at", desc=True)
            .execute()
        )
        purchases = []
        for row in response.data or []:
            photo = row.get("photo")
            if isinstance(photo, list):
                photo = photo[0] if photo else None
            created = row.get("created_at")
            purchases.append(
                PurchaseRecord(
                    id=str(row["id"]),
                    photo_id=str(row["photo_id"]),
                    amount=to_decimal(row["amount"]),
                    created_at=(
                        datetime.fromisoformat(created)
                        if isinstance(created, str) and created
                        else None
                    ),
                    event_name=photo.get("event_name") if photo else None,
                    url=photo.get("url") if photo else None,
                )
            )
        return purchases

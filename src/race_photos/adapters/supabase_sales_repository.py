"""Supabase-backed sales repository for photographer dashboards."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from race_photos.domain.sales import PhotoSales, Sale
from race_photos.services.pricing import to_decimal
from race_photos.services.sales import SalesRepository

_SALE_COLUMNS = (
    "id, photo_id, amount, created_at, "
    "buyer:profiles!purchases_buyer_id_fkey(username, full_name), "
    "photo:photos!inner(photographer_id, event_name)"
)
_PHOTO_SALES_COLUMNS = "id, title, watermark_url, price, purchases(amount)"


@dataclass
class SupabaseSalesRepository(SalesRepository):
    """Supabase implementation for sales queries."""

    client: Client

    def list_sales(
        self, photographer_id: str, since: datetime | None = None
    ) -> list[Sale]:
        """Return sales of the photographer's photos, newest first."""
        query = (
            self.client.table("purchases")
            .select(_SALE_COLUMNS)
            .eq("photo.photographer_id", photographer_id)
        )
        if since is not None:
            query = query.gte("created_at", since.isoformat())
        response = query.order("created_at", desc=True).execute()
        return [_to_sale(row) for row in response.data or []]

    def list_photo_sales(
        self, photographer_id: str, event_name: str
    ) -> list[PhotoSales]:
        """Return per-photo sales counts and revenue for one album."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_SALES_COLUMNS)
            .eq("photographer_id", photographer_id)
            .eq("event_name", event_name)
            .order("created_at", desc=True)
            .execute()
        )
        photo_sales = []
        for row in response.data or []:
            amounts = [
                to_decimal(item["amount"]) for item in row.get("purchases") or []
            ]
            photo_sales.append(
                PhotoSales(
                    photo_id=str(row["id"]),
                    title=row.get("title"),
                    watermark_url=row.get("watermark_url"),
                    price=to_decimal(row.get("price") or 0),
                    sales_count=len(amounts),
                    total_revenue=sum(amounts, to_decimal(0)),
                )
            )
        return photo_sales


def _one(value: object) -> dict[str, object]:
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else {}


def _to_sale(row: dict[str, object]) -> Sale:
    buyer = _one(row.get("buyer"))
    photo = _one(row.get("photo"))
    return Sale(
        id=str(row["id"]),
        photo_id=str(row["photo_id"]),
        amount=to_decimal(row["amount"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        buyer_name=str(buyer.get("full_name") or buyer.get("username") or ""),
        event_name=str(photo.get("event_name") or ""),
    )

"""Supabase-backed photo repository."""

from dataclasses import dataclass

from supabase import Client

from race_photos.domain.photos import CheckoutPhoto, GalleryPhoto, Photographer
from race_photos.services.checkout import CheckoutPhotoRepository
from race_photos.services.gallery import GalleryPhotoRepository
from race_photos.services.pricing import to_decimal

_GALLERY_COLUMNS = (
    "id, event_name, title, url, watermark_url, preview_image, price, "
    "bib_numbers, photographer:profiles(id, username)"
)


@dataclass
class SupabasePhotoRepository(CheckoutPhotoRepository, GalleryPhotoRepository):
    """Supabase implementation for photo queries."""

    client: Client

    def get_checkout_photos(self, photo_ids: list[str]) -> list[CheckoutPhoto]:
        """Return prices and photographer accounts for the given photos."""
        response = (
            self.client.table("photos")
            .select("id, price, photographer_id, profiles(stripe_account_id)")
            .in_("id", photo_ids)
            .execute()
        )
        photos = []
        for row in response.data or []:
            profile = _embedded(row.get("profiles"))
            photos.append(
                CheckoutPhoto(
                    id=str(row["id"]),
                    price=to_decimal(row["price"]),
                    photographer_id=str(row["photographer_id"]),
                    stripe_account_id=(
                        profile.get("stripe_account_id") if profile else None
                    ),
                )
            )
        return photos

    def list_published_photos(self) -> list[GalleryPhoto]:
        """Return photos with an uploaded file, newest first."""
        response = (
            self.client.table("photos")
            .select(_GALLERY_COLUMNS)
            .not_.is_("url", "null")
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_gallery_photo(row) for row in response.data or []]

    def list_event_photos(self, event_name: str) -> list[GalleryPhoto]:
        """Return photos of one event, newest first."""
        response = (
            self.client.table("photos")
            .select(_GALLERY_COLUMNS)
            .eq("event_name", event_name)
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_gallery_photo(row) for row in response.data or []]

    def list_photographer_photos(self, photographer_id: str) -> list[GalleryPhoto]:
        """Return one photographer's uploaded photos, newest first."""
        response = (
            self.client.table("photos")
            .select(_GALLERY_COLUMNS)
            .eq("photographer_id", photographer_id)
            .not_.is_("url", "null")
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_gallery_photo(row) for row in response.data or []]


def _embedded(value: object) -> dict[str, object] | None:
    """Return a to-one embedded row, which PostgREST may wrap in a list."""
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else None


def _to_gallery_photo(row: dict[str, object]) -> GalleryPhoto:
    photographer = _embedded(row.get("photographer"))
    return GalleryPhoto(
        id=str(row["id"]),
        event_name=str(row.get("event_name") or ""),
        title=row.get("title"),
        url=row.get("url"),
        watermark_url=row.get("watermark_url"),
        preview_image=row.get("preview_image"),
        price=to_decimal(row.get("price") or 0),
        bib_numbers=[str(bib) for bib in row.get("bib_numbers") or []],
        photographer=(
            Photographer(
                id=str(photographer["id"]),
                username=str(photographer.get("username") or ""),
            )
            if photographer
            else None
        ),
    )

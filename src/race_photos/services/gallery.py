"""Album browsing, bib search, photographer pages and purchase history."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.photos import (
    Album,
    GalleryPhoto,
    Photographer,
    PhotographerPage,
)
from race_photos.domain.purchases import PurchaseRecord
from race_photos.errors import NotFound
from race_photos.services.profiles import ProfileRepository


class GalleryPhotoRepository(Protocol):
    """Read access to published photos."""

    def list_published_photos(self) -> list[GalleryPhoto]:
        """Return photos that have an uploaded file, newest first."""

    def list_event_photos(self, event_name: str) -> list[GalleryPhoto]:
        """Return photos of one event, newest first."""

    def list_photographer_photos(self, photographer_id: str) -> list[GalleryPhoto]:
        """Return one photographer's photos with an uploaded file, newest first."""


class PurchaseHistoryRepository(Protocol):
    """Read access to a buyer's purchases."""

    def list_purchases_for_buyer(self, buyer_id: str) -> list[PurchaseRecord]:
        """Return purchases of a buyer, newest first."""


class ObjectStorage(Protocol):
    """Resolves stored object paths to public URLs."""

    def public_url(self, path: str) -> str:
        """Return the public URL of a stored object."""


@dataclass
class GalleryService:
    """Assembles albums and photo listings for racers."""

    photo_repository: GalleryPhotoRepository
    purchase_repository: PurchaseHistoryRepository
    profile_repository: ProfileRepository
    storage: ObjectStorage

    def list_albums(self, query: str | None = None) -> list[Album]:
        """Return albums, optionally filtered by event name."""
        albums = group_albums(self.photo_repository.list_published_photos())
        return [
            self._with_public_preview(album) for album in filter_albums(albums, query)
        ]

    def list_event_photos(
        self, event_name: str, bib: str | None = None
    ) -> list[GalleryPhoto]:
        """Return an event's photos with public watermarked URLs.

        The unwatermarked original is withheld; buyers get it from
        their purchase history.
        """
        photos = filter_photos_by_bib(
            self.photo_repository.list_event_photos(event_name), bib
        )
        return [
            GalleryPhoto(
                id=photo.id,
                event_name=photo.event_name,
                title=photo.title,
                url=None,
                watermark_url=self._public_url(photo.watermark_url),
                preview_image=photo.preview_image,
                price=photo.price,
                bib_numbers=photo.bib_numbers,
                photographer=photo.photographer,
            )
            for photo in photos
        ]

    def photographer_page(self, photographer_id: str) -> PhotographerPage:
        """Return a photographer's public profile and albums."""
        profile = self.profile_repository.get_profile(photographer_id)
        if profile is None:
            raise NotFound("Photographer not found")
        albums = group_albums(
            self.photo_repository.list_photographer_photos(photographer_id),
            preview=watermark_preview,
        )
        return PhotographerPage(
            photographer=Photographer(id=profile.id, username=profile.username),
            albums=[self._with_public_preview(album) for album in albums],
        )

    def list_purchases(self, buyer_id: str) -> list[PurchaseRecord]:
        """Return a buyer's purchases with public photo URLs."""
        return [
            PurchaseRecord(
                id=purchase.id,
                photo_id=purchase.photo_id,
                amount=purchase.amount,
                created_at=purchase.created_at,
                event_name=purchase.event_name,
                url=self._public_url(purchase.url),
            )
            for purchase in self.purchase_repository.list_purchases_for_buyer(buyer_id)
        ]

    def _with_public_preview(self, album: Album) -> Album:
        return Album(
            event_name=album.event_name,
            photo_count=album.photo_count,
            photographer=album.photographer,
            preview_url=self._public_url(album.preview_url),
        )

    def _public_url(self, path: str | None) -> str | None:
        if not path:
            return None
        if path.startswith(("http://", "https://")):
            return path
        return self.storage.public_url(path)


def album_preview(photos: list[GalleryPhoto]) -> str | None:
    """Preview of the newest photo, falling back to a later preview image."""
    first = photos[0]
    return first.preview_image or first.url or next(
        (photo.preview_image for photo in photos[1:] if photo.preview_image), None
    )


def watermark_preview(photos: list[GalleryPhoto]) -> str | None:
    return photos[0].watermark_url


def group_albums(
    photos: list[GalleryPhoto],
    preview: Callable[[list[GalleryPhoto]], str | None] = album_preview,
) -> list[Album]:
    """Group photos by event name, keeping first-seen order."""
    grouped: dict[str, list[GalleryPhoto]] = {}
    for photo in photos:
        grouped.setdefault(photo.event_name, []).append(photo)

    return [
        Album(
            event_name=event_name,
            photo_count=len(event_photos),
            photographer=event_photos[0].photographer,
            preview_url=preview(event_photos),
        )
        for event_name, event_photos in grouped.items()
    ]


def filter_albums(albums: list[Album], query: str | None) -> list[Album]:
    """Keep albums whose event name contains the query, ignoring case."""
    if not query or not query.strip():
        return albums
    needle = query.strip().lower()
    return [album for album in albums if needle in album.event_name.lower()]


def filter_photos_by_bib(
    photos: list[GalleryPhoto], bib: str | None
) -> list[GalleryPhoto]:
    """Keep photos with a bib number containing the query, ignoring case."""
    if not bib or not bib.strip():
        return photos
    needle = bib.strip().lower()
    return [
        photo
        for photo in photos
        if any(needle in number.lower() for number in photo.bib_numbers)
    ]

"""Domain models for race photos and albums."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Photographer:
    """Minimal public view of a photographer."""

    id: str
    username: str


@dataclass(frozen=True)
class CheckoutPhoto:
    """Photo data needed to price a checkout and route its funds."""

    id: str
    price: Decimal
    photographer_id: str
    stripe_account_id: str | None


@dataclass(frozen=True)
class GalleryPhoto:
    """Photo as listed in an event album."""

    id: str
    event_name: str
    title: str | None
    url: str | None
    watermark_url: str | None
    preview_image: str | None
    price: Decimal
    bib_numbers: list[str] = field(default_factory=list)
    photographer: Photographer | None = None


@dataclass(frozen=True)
class Album:
    """Photos of one event grouped together."""

    event_name: str
    photo_count: int
    photographer: Photographer | None
    preview_url: str | None


@dataclass(frozen=True)
class PhotographerPage:
    """Public page of a photographer with their albums."""

    photographer: Photographer
    albums: list[Album] = field(default_factory=list)

"""Read endpoints for albums, photographer pages, profiles and purchases."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from race_photos.api.dependencies import get_container, require_user
from race_photos.domain.profiles import AuthUser  # noqa: TC001

router = APIRouter(tags=["gallery"])


@router.get("/albums")
async def list_albums(request: Request, q: str | None = None) -> dict[str, object]:
    """Return event albums, optionally filtered by event name."""
    return {"albums": get_container(request).gallery_service.list_albums(q)}


@router.get("/albums/{event_name}/photos")
async def list_event_photos(
    event_name: str, request: Request, bib: str | None = None
) -> dict[str, object]:
    """Return the photos of one event, optionally filtered by bib number."""
    gallery_service = get_container(request).gallery_service
    return {"photos": gallery_service.list_event_photos(event_name, bib)}


@router.get("/profile")
async def get_profile(
    request: Request, user: AuthUser = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's profile, creating it on first access."""
    return {"profile": get_container(request).profile_service.ensure_profile(user)}


@router.get("/purchases")
async def list_purchases(
    request: Request, user: AuthUser = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's purchased photos."""
    gallery_service = get_container(request).gallery_service
    return {"purchases": gallery_service.list_purchases(user.id)}


@router.get("/photographers/{photographer_id}")
async def photographer_page(
    photographer_id: str, request: Request
) -> dict[str, object]:
    """Return a photographer's public profile and albums."""
    gallery_service = get_container(request).gallery_service
    return {"photographer": gallery_service.photographer_page(photographer_id)}

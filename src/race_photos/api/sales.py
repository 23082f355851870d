"""Photographer sales dashboard endpoints."""

from __future__ import annotations

from datetime import UTC, date, datetime  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from race_photos.api.dependencies import get_container, require_user
from race_photos.domain.profiles import AuthUser  # noqa: TC001
from race_photos.domain.sales import SalesRange
from race_photos.services.sales import SalesFilter

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("")
async def list_sales(  # noqa: PLR0913
    request: Request,
    album: str | None = None,
    start: date | None = None,
    end: date | None = None,
    page: int = 1,
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Return a page of the caller's sales, newest first."""
    sales_service = get_container(request).sales_service
    sales_page = sales_service.list_transactions(
        user.id, SalesFilter(album=album, start=start, end=end), page
    )
    return {"sales": sales_page}


@router.get("/analytics")
async def sales_analytics(
    request: Request,
    sales_range: SalesRange = Query(SalesRange.MONTH, alias="range"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Return sales totals and revenue per day for a look-back window."""
    sales_service = get_container(request).sales_service
    return {"analytics": sales_service.analytics(user.id, sales_range)}


@router.get("/export.csv", response_class=PlainTextResponse)
async def export_sales(
    request: Request,
    album: str | None = None,
    start: date | None = None,
    end: date | None = None,
    user: AuthUser = Depends(require_user),
) -> PlainTextResponse:
    """Download the caller's filtered sales as a CSV report."""
    sales_service = get_container(request).sales_service
    report = sales_service.export_report(
        user.id, SalesFilter(album=album, start=start, end=end)
    )
    filename = f"sales-report-{datetime.now(tz=UTC).date().isoformat()}.csv"
    return PlainTextResponse(
        report,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/photos")
async def album_photo_sales(
    request: Request, album: str, user: AuthUser = Depends(require_user)
) -> dict[str, object]:
    """Return sales counts and revenue for each photo of one album."""
    sales_service = get_container(request).sales_service
    return {"photos": sales_service.photo_sales(user.id, album)}

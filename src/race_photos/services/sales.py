"""Sales history, analytics and reports for photographers."""

import calendar
import csv
import io
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Protocol

from race_photos.domain.sales import (
    DailyRevenue,
    PhotoSales,
    Sale,
    SalesAnalytics,
    SalesPage,
    SalesRange,
)
from race_photos.errors import BadRequest

DEFAULT_PAGE_SIZE = 10
MONTHS_PER_YEAR = 12
REPORT_HEADER = ["Date", "Buyer", "Album", "Amount"]


class SalesRepository(Protocol):
    """Read access to purchases of a photographer's photos."""

    def list_sales(
        self, photographer_id: str, since: datetime | None = None
    ) -> list[Sale]:
        """Return sales of the photographer's photos, newest first."""

    def list_photo_sales(
        self, photographer_id: str, event_name: str
    ) -> list[PhotoSales]:
        """Return per-photo sales figures for one of the photographer's albums."""


@dataclass(frozen=True)
class SalesFilter:
    """Album substring and inclusive date bounds applied to sales."""

    album: str | None = None
    start: date | None = None
    end: date | None = None


@dataclass
class SalesService:
    """Dashboard queries for a photographer's sales."""

    repository: SalesRepository
    page_size: int = DEFAULT_PAGE_SIZE

    def list_transactions(
        self,
        photographer_id: str,
        sales_filter: SalesFilter | None = None,
        page: int = 1,
    ) -> SalesPage:
        """Return one page of filtered sales."""
        if page < 1:
            raise BadRequest("Page must be at least 1")
        sales = filter_sales(
            self.repository.list_sales(photographer_id), sales_filter or SalesFilter()
        )
        offset = (page - 1) * self.page_size
        return SalesPage(
            items=sales[offset : offset + self.page_size],
            page=page,
            total_pages=math.ceil(len(sales) / self.page_size),
            total_items=len(sales),
        )

    def analytics(
        self,
        photographer_id: str,
        sales_range: SalesRange,
        now: datetime | None = None,
    ) -> SalesAnalytics:
        """Return totals and revenue per day over the look-back window."""
        since = window_start(now or datetime.now(tz=UTC), sales_range)
        sales = self.repository.list_sales(photographer_id, since=since)
        by_day: dict[date, Decimal] = {}
        for sale in sales:
            day = sale.created_at.date()
            by_day[day] = by_day.get(day, Decimal("0")) + sale.amount
        return SalesAnalytics(
            range=sales_range,
            since=since,
            total_sales=len(sales),
            total_revenue=sum((sale.amount for sale in sales), Decimal("0")),
            revenue_by_day=[
                DailyRevenue(day=day, amount=amount)
                for day, amount in sorted(by_day.items())
            ],
        )

    def export_report(
        self, photographer_id: str, sales_filter: SalesFilter | None = None
    ) -> str:
        """Render all filtered sales as CSV."""
        sales = filter_sales(
            self.repository.list_sales(photographer_id), sales_filter or SalesFilter()
        )
        return render_sales_csv(sales)

    def photo_sales(self, photographer_id: str, event_name: str) -> list[PhotoSales]:
        return self.repository.list_photo_sales(photographer_id, event_name)


def filter_sales(sales: list[Sale], sales_filter: SalesFilter) -> list[Sale]:
    """Keep sales matching the album substring and the inclusive date range."""
    album = (sales_filter.album or "").strip().lower()
    filtered = []
    for sale in sales:
        day = sale.created_at.date()
        if album and album not in sale.event_name.lower():
            continue
        if sales_filter.start and day < sales_filter.start:
            continue
        if sales_filter.end and day > sales_filter.end:
            continue
        filtered.append(sale)
    return filtered


def window_start(now: datetime, sales_range: SalesRange) -> datetime:
    """Return the start of a look-back window ending at ``now``."""
    if sales_range is SalesRange.WEEK:
        return now - timedelta(days=7)
    if sales_range is SalesRange.MONTH:
        return _months_before(now, 1)
    return _months_before(now, MONTHS_PER_YEAR)


def _months_before(moment: datetime, months: int) -> datetime:
    # Clamp to the last day of a shorter target month.
    year, month_index = divmod(moment.year * 12 + moment.month - 1 - months, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def render_sales_csv(sales: list[Sale]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for sale in sales:
        writer.writerow(
            [
                sale.created_at.date().isoformat(),
                sale.buyer_name,
                sale.event_name,
                f"${sale.amount:.2f}",
            ]
        )
    return buffer.getvalue()

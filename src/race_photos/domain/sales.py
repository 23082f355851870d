"""Domain models for the photographer sales dashboard."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class SalesRange(str, Enum):
    """Look-back window for sales analytics."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Sale:
    """One purchase of a photographer's photo."""

    id: str
    photo_id: str
    amount: Decimal
    created_at: datetime
    buyer_name: str
    event_name: str


@dataclass(frozen=True)
class SalesPage:
    """A page of filtered sales, newest first."""

    items: list[Sale]
    page: int
    total_pages: int
    total_items: int


@dataclass(frozen=True)
class DailyRevenue:
    day: date
    amount: Decimal


@dataclass(frozen=True)
class SalesAnalytics:
    """Sales totals over a look-back window."""

    range: SalesRange
    since: datetime
    total_sales: int
    total_revenue: Decimal
    revenue_by_day: list[DailyRevenue] = field(default_factory=list)


@dataclass(frozen=True)
class PhotoSales:
    """Sales figures of a single photo in an album."""

    photo_id: str
    title: str | None
    watermark_url: str | None
    price: Decimal
    sales_count: int
    total_revenue: Decimal

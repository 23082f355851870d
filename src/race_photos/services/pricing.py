"""Price and platform fee arithmetic in minor currency units."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_FEE_PERCENT = 10


def to_decimal(value: object) -> Decimal:
    """Convert a price read from JSON or the database to an exact decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(str(value).strip())


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_minor_units(price: Decimal) -> int:
    """Return ``round(price * 100)``, rounding halves away from zero."""
    return _round_half_up(price * 100)


def item_fee(price: Decimal, fee_percent: int = DEFAULT_FEE_PERCENT) -> int:
    """Platform fee for one photo, computed from its major-unit price."""
    return _round_half_up(price * fee_percent)


def aggregate_fee(
    prices: Iterable[Decimal], fee_percent: int = DEFAULT_FEE_PERCENT
) -> int:
    """Platform fee for a whole payment: ``round(sum(prices) * percent)``."""
    total = sum(prices, Decimal("0"))
    return _round_half_up(total * fee_percent)


def split_minor_amount(total: int, parts: int) -> list[int]:
    """Split ``total`` into ``parts`` near-equal shares that sum to ``total``.

    Leftover units go to the first shares.
    """
    if parts <= 0:
        return []
    base, remainder = divmod(total, parts)
    return [base + 1 if index < remainder else base for index in range(parts)]


def to_major_units(amount: int) -> Decimal:
    """Convert minor units back to a two-place major-unit decimal."""
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))

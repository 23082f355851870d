"""Shopping cart of photos selected for purchase."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class CartItem:
    """Photo in the cart with its price in major units."""

    photo_id: str
    price: Decimal


@dataclass
class Cart:
    """Ordered set of photos a racer intends to buy."""

    items: list[CartItem] = field(default_factory=list)

    def add(self, photo_id: str, price: Decimal) -> None:
        """Add a photo unless it is already in the cart."""
        if not self.contains(photo_id):
            self.items.append(CartItem(photo_id=photo_id, price=price))

    def remove(self, photo_id: str) -> None:
        """Remove a photo from the cart if present."""
        self.items = [item for item in self.items if item.photo_id != photo_id]

    def contains(self, photo_id: str) -> bool:
        return any(item.photo_id == photo_id for item in self.items)

    def total(self) -> Decimal:
        """Return the sum of item prices in major units."""
        return sum((item.price for item in self.items), Decimal("0"))

    def photo_ids(self) -> list[str]:
        return [item.photo_id for item in self.items]

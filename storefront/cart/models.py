"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Tuple

from storefront.catalog import Product
from storefront.money import multiply, parse_price


@dataclass(frozen=True)
class CartLine:
    """Single line in the cart; display fields are snapshotted at add time."""
    id: int
    name: str
    price: Decimal
    image: str
    quantity: int = 1

    @classmethod
    def from_product(cls, product: Product) -> "CartLine":
        """Snapshot a catalog product into a new line with quantity 1."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
            quantity=1,
        )

    @property
    def total_price(self) -> Decimal:
        """Price for all units of this line."""
        return multiply(self.price, self.quantity)

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to the persisted dictionary shape."""
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "img": self.image,
            "qty": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a persisted dictionary.

        Raises:
            KeyError: If a required field is missing.
            TypeError, ValueError: If a field has the wrong type or range.
        """
        line_id = data["id"]
        quantity = data["qty"]
        # bool is an int subclass; reject it explicitly
        if isinstance(line_id, bool) or not isinstance(line_id, int) or line_id <= 0:
            raise ValueError(f"Invalid line id: {line_id!r}")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"Invalid quantity: {quantity!r}")
        name = data["name"]
        image = data["img"]
        if not isinstance(name, str) or not isinstance(image, str):
            raise TypeError("name and img must be strings")
        return cls(
            id=line_id,
            name=name,
            price=parse_price(data["price"]),
            image=image,
            quantity=quantity,
        )


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable view of the cart handed to renderers."""
    lines: Tuple[CartLine, ...] = field(default_factory=tuple)

    @property
    def subtotal(self) -> Decimal:
        """Sum of price x quantity; exactly Decimal("0") when empty."""
        return sum((line.total_price for line in self.lines), Decimal("0"))

    @property
    def item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find(self, product_id: int):
        """Return the line for product_id, or None."""
        return next((line for line in self.lines if line.id == product_id), None)

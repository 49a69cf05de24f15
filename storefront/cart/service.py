"""Cart store: owns the cart lines and keeps storage and views in sync."""
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from storefront.catalog import Catalog
from storefront.logging import get_logger, sanitize_string_for_logging
from .models import CartLine, CartSnapshot
from .storage import CartPersistence

logger = get_logger(__name__)

CartListener = Callable[[CartSnapshot], None]


class CartStore:
    """
    Manages the shopping cart for one session.

    Every mutation persists the whole cart and then notifies subscribers
    with an immutable snapshot. Operations on ids that are not in the
    catalog (add) or not in the cart (remove/update) are silent no-ops.
    A failed write is logged by the persistence adapter and the in-memory
    change stands.
    """

    def __init__(
        self,
        catalog: Catalog,
        persistence: CartPersistence,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.catalog = catalog
        self.persistence = persistence
        self._notify = notify
        self._lines: List[CartLine] = persistence.load()
        self._listeners: List[CartListener] = []
        if self._lines:
            logger.info(f"Restored cart with {len(self._lines)} line(s)")

    # ---- read side -------------------------------------------------------

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(lines=tuple(self._lines))

    def subtotal(self) -> Decimal:
        """Sum of price x quantity over all lines (Decimal("0") when empty)."""
        return self.snapshot().subtotal

    def item_count(self) -> int:
        """Total units in the cart, as shown on the badge."""
        return self.snapshot().item_count

    def _index_of(self, product_id: int) -> Optional[int]:
        for index, line in enumerate(self._lines):
            if line.id == product_id:
                return index
        return None

    # ---- subscriptions ---------------------------------------------------

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def _commit(self) -> None:
        self.persistence.save(self._lines)
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ---- mutations -------------------------------------------------------

    def add_to_cart(self, product_id: int) -> None:
        """Add one unit of a catalog product."""
        product = self.catalog.get(product_id)
        if product is None:
            return

        index = self._index_of(product_id)
        if index is not None:
            line = self._lines[index]
            self._lines[index] = line.with_quantity(line.quantity + 1)
        else:
            self._lines.append(CartLine.from_product(product))

        logger.debug(f"Added {sanitize_string_for_logging(product.name)} to cart")
        self._commit()
        if self._notify is not None:
            self._notify(f"{product.name} added to cart!")

    def remove_from_cart(self, product_id: int) -> None:
        """Drop the line for product_id."""
        index = self._index_of(product_id)
        if index is None:
            return
        del self._lines[index]
        self._commit()

    def update_quantity(self, product_id: int, delta: int) -> None:
        """Change a line's quantity by delta; at zero or below the line goes away."""
        index = self._index_of(product_id)
        if index is None:
            return

        line = self._lines[index]
        new_quantity = line.quantity + delta
        if new_quantity <= 0:
            self.remove_from_cart(product_id)
            return

        self._lines[index] = line.with_quantity(new_quantity)
        self._commit()

    def clear(self) -> None:
        """Empty the cart (used after an order is placed)."""
        self._lines = []
        self._commit()

"""
View renderer - projects cart snapshots and filtered products into the page.

Each render replaces the contents of its insertion point, so rendering the
same state twice yields the same markup and the same set of handlers.
Missing insertion points turn a render into a no-op.
"""
from typing import Iterable

from storefront.cart import CartLine, CartSnapshot, CartStore
from storefront.catalog import Product
from storefront.money import format_money
from .document import Document, Element, Event
from .layout import ElementIds

# Gray box shown when a product image fails to load
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iNDAwIiBoZWlnaHQ9IjMwMCIgdmlld0JveD0iMCAwIDQwMCAzMDAiIGZpbGw9Im5vbmUiIHhtbG5zPSJodHRwOi8vd3d3LnczLm9yZy8yMDAwL3N2ZyI+CjxyZWN0IHdpZHRoPSI0MDAiIGhlaWdodD0iMzAwIiBmaWxsPSIjMWUyYTNiIi8+CjxwYXRoIGQ9Ik0xNzUgMTI1SDIyNVYxNzVIMTc1VjEyNVoiIGZpbGw9IiM5ZmIzZDEiLz4KPHN2Zz4K"
)


def _image(src: str, alt: str, css_class: str, width: int, height: int) -> Element:
    return Element(
        "img",
        classes=[css_class],
        attrs={
            "src": src,
            "alt": alt,
            "width": str(width),
            "height": str(height),
            "loading": "lazy",
            "decoding": "async",
        },
    )


def _on_image_load(event: Event) -> None:
    event.target.style["opacity"] = "1"


def _on_image_error(event: Event) -> None:
    image = event.target
    image.set_attribute("src", PLACEHOLDER_IMAGE)
    image.set_attribute("alt", "Image not available")


class ViewRenderer:
    """Writes the grid, cart drawer, badge and order summary."""

    def __init__(self, document: Document, store: CartStore):
        self.document = document
        self.store = store

    # ---- product grid ------------------------------------------------------

    def _product_card(self, product: Product) -> Element:
        image = _image(product.image, product.name, "product-image", 400, 300)
        image.add_event_listener("load", _on_image_load)
        image.add_event_listener("error", _on_image_error)

        button = Element(
            "button",
            classes=["add-to-cart"],
            attrs={"data-id": str(product.id), "aria-label": f"Add {product.name} to cart"},
            text="Add to Cart",
        )

        def on_add(event: Event, product_id: int = product.id) -> None:
            event.stop_propagation()
            self.store.add_to_cart(product_id)

        button.add_event_listener("click", on_add)

        return Element(
            "div",
            image,
            Element(
                "div",
                Element("h3", classes=["product-name"], text=product.name),
                Element("div", classes=["product-price"], text=format_money(product.price)),
                button,
                classes=["product-info"],
            ),
            classes=["product-card"],
            attrs={"data-id": str(product.id)},
        )

    def render_products(self, products: Iterable[Product]) -> None:
        grid = self.document.get_element_by_id(ElementIds.PRODUCTS_GRID)
        if grid is None:
            return
        grid.replace_children(*[self._product_card(p) for p in products])

    # ---- cart drawer -------------------------------------------------------

    def _cart_row(self, line: CartLine) -> Element:
        def qty_button(delta: int, label: str, text: str) -> Element:
            button = Element(
                "button",
                classes=["qty-btn"],
                attrs={"data-id": str(line.id), "data-delta": str(delta), "aria-label": label},
                text=text,
            )
            button.add_event_listener(
                "click", lambda event: self.store.update_quantity(line.id, delta)
            )
            return button

        remove = Element(
            "button",
            classes=["remove-btn"],
            attrs={"data-id": str(line.id), "aria-label": "Remove item"},
            text="Remove",
        )
        remove.add_event_listener("click", lambda event: self.store.remove_from_cart(line.id))

        return Element(
            "div",
            _image(line.image, line.name, "cart-item-image", 60, 60),
            Element(
                "div",
                Element("div", classes=["cart-item-name"], text=line.name),
                Element("div", classes=["cart-item-price"], text=format_money(line.price)),
                Element(
                    "div",
                    qty_button(-1, "Decrease quantity", "-"),
                    Element("span", classes=["qty-display"], text=str(line.quantity)),
                    qty_button(1, "Increase quantity", "+"),
                    remove,
                    classes=["cart-item-controls"],
                ),
                classes=["cart-item-info"],
            ),
            classes=["cart-item"],
            attrs={"data-id": str(line.id)},
        )

    def render_cart(self, snapshot: CartSnapshot) -> None:
        cart_items = self.document.get_element_by_id(ElementIds.CART_ITEMS)
        subtotal = self.document.get_element_by_id(ElementIds.SUBTOTAL_AMOUNT)
        if cart_items is None or subtotal is None:
            return

        if snapshot.is_empty:
            cart_items.replace_children(
                Element(
                    "div",
                    Element("div", classes=["empty-cart-icon"], text="\U0001F6D2"),
                    Element("p", text="Your cart is empty"),
                    Element("p", text="Add some products to get started!"),
                    classes=["empty-cart"],
                )
            )
        else:
            cart_items.replace_children(*[self._cart_row(line) for line in snapshot.lines])
        subtotal.text = format_money(snapshot.subtotal)

    def update_badge(self, snapshot: CartSnapshot) -> None:
        badge = self.document.get_element_by_id(ElementIds.CART_COUNT)
        if badge is None:
            return
        count = snapshot.item_count
        badge.text = str(count)
        badge.style["display"] = "flex" if count > 0 else "none"

    # ---- checkout summary ----------------------------------------------------

    def render_order_summary(self, snapshot: CartSnapshot) -> None:
        order_items = self.document.get_element_by_id(ElementIds.ORDER_ITEMS)
        total = self.document.get_element_by_id(ElementIds.TOTAL_AMOUNT)
        if order_items is None or total is None:
            return

        order_items.replace_children(*[
            Element(
                "div",
                Element(
                    "div",
                    _image(line.image, line.name, "order-item-image", 40, 40),
                    Element(
                        "div",
                        Element("div", classes=["order-item-name"], text=line.name),
                        Element("div", classes=["order-item-qty"], text=f"Qty: {line.quantity}"),
                        classes=["order-item-details"],
                    ),
                    classes=["order-item-info"],
                ),
                Element("div", classes=["order-item-price"], text=format_money(line.total_price)),
                classes=["order-item"],
            )
            for line in snapshot.lines
        ])
        total.text = format_money(snapshot.subtotal)

    def render(self, snapshot: CartSnapshot) -> None:
        """Re-project everything that depends on the cart."""
        self.render_cart(snapshot)
        self.update_badge(snapshot)

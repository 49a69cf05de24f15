"""Default page skeleton with the named insertion points and controls."""
import asyncio
from typing import Optional

from .document import Document, Element


class ElementIds:
    """Ids the renderer and controllers look up in the document."""

    # Insertion points
    PRODUCTS_GRID = "products-grid"
    CART_ITEMS = "cart-items"
    SUBTOTAL_AMOUNT = "subtotal-amount"
    CART_COUNT = "cart-count"
    ORDER_ITEMS = "order-items"
    TOTAL_AMOUNT = "total-amount"
    TOAST = "toast"
    TOAST_MESSAGE = "toast-message"

    # Filter controls
    SEARCH_INPUT = "search-input"
    PRICE_FILTER = "price-filter"
    SORT_SELECT = "sort-select"

    # Drawer
    CART_TOGGLE = "cart-toggle"
    CART_DRAWER = "cart-drawer"
    CART_OVERLAY = "cart-overlay"
    CART_CLOSE = "cart-close"

    # Checkout modal
    CHECKOUT_BTN = "checkout-btn"
    CHECKOUT_MODAL = "checkout-modal"
    MODAL_CLOSE = "modal-close"
    MODAL_CANCEL = "modal-cancel"
    PLACE_ORDER = "place-order"


PRICE_FILTER_OPTIONS = (
    ("", "All Prices"),
    ("0-25", "$0 - $25"),
    ("25-50", "$25 - $50"),
    ("50-100", "$50 - $100"),
    ("100+", "$100+"),
)

SORT_OPTIONS = (
    ("name", "Name"),
    ("price-low", "Price: Low to High"),
    ("price-high", "Price: High to Low"),
)


def _select(element_id: str, options, label: str, value: str) -> Element:
    return Element(
        "select",
        *[Element("option", attrs={"value": v}, text=t) for v, t in options],
        id=element_id,
        attrs={"aria-label": label, "value": value},
    )


def build_document(loop: Optional[asyncio.AbstractEventLoop] = None) -> Document:
    """Create a document holding the storefront page."""
    document = Document(loop=loop)
    ids = ElementIds

    header = Element(
        "header",
        Element("h1", classes=["logo"], text="Arcadia"),
        Element(
            "button",
            Element("span", id=ids.CART_COUNT, classes=["cart-count"], text="0"),
            id=ids.CART_TOGGLE,
            classes=["cart-toggle"],
            attrs={"aria-expanded": "false", "aria-label": "Open shopping cart"},
        ),
        classes=["header"],
    )

    filters = Element(
        "section",
        Element("input", id=ids.SEARCH_INPUT,
                attrs={"type": "search", "placeholder": "Search products...", "aria-label": "Search products", "value": ""}),
        _select(ids.PRICE_FILTER, PRICE_FILTER_OPTIONS, "Filter by price", ""),
        _select(ids.SORT_SELECT, SORT_OPTIONS, "Sort products", "name"),
        classes=["filters"],
    )

    main = Element(
        "main",
        filters,
        Element("div", id=ids.PRODUCTS_GRID, classes=["products-grid"]),
    )

    drawer = Element(
        "aside",
        Element(
            "div",
            Element("h2", text="Shopping Cart"),
            Element("button", id=ids.CART_CLOSE, classes=["cart-close"],
                    attrs={"aria-label": "Close cart"}, text="×"),
            classes=["cart-header"],
        ),
        Element("div", id=ids.CART_ITEMS, classes=["cart-items"]),
        Element(
            "div",
            Element("span", text="Subtotal: "),
            Element("span", id=ids.SUBTOTAL_AMOUNT, text="$0.00"),
            Element("button", id=ids.CHECKOUT_BTN, classes=["checkout-btn"], text="Checkout"),
            classes=["cart-footer"],
        ),
        id=ids.CART_DRAWER,
        classes=["cart-drawer"],
        attrs={"role": "dialog", "aria-label": "Shopping cart"},
    )

    modal = Element(
        "div",
        Element(
            "div",
            Element(
                "div",
                Element("h2", text="Checkout"),
                Element("button", id=ids.MODAL_CLOSE, classes=["modal-close"],
                        attrs={"aria-label": "Close checkout"}, text="×"),
                classes=["modal-header"],
            ),
            Element("div", id=ids.ORDER_ITEMS, classes=["order-items"]),
            Element(
                "div",
                Element("span", text="Total: "),
                Element("span", id=ids.TOTAL_AMOUNT, text="$0.00"),
                classes=["order-total"],
            ),
            Element(
                "div",
                Element("button", id=ids.MODAL_CANCEL, classes=["btn-secondary"], text="Cancel"),
                Element("button", id=ids.PLACE_ORDER, classes=["btn-primary"], text="Place Order"),
                classes=["modal-actions"],
            ),
            classes=["modal-content"],
        ),
        id=ids.CHECKOUT_MODAL,
        classes=["modal"],
        attrs={"role": "dialog", "aria-modal": "true", "aria-label": "Checkout"},
    )

    toast = Element(
        "div",
        Element("span", id=ids.TOAST_MESSAGE),
        id=ids.TOAST,
        classes=["toast"],
        attrs={"role": "status", "aria-live": "polite"},
    )

    for part in (
        header,
        main,
        Element("div", id=ids.CART_OVERLAY, classes=["cart-overlay"]),
        drawer,
        modal,
        toast,
    ):
        document.body.append(part)
    return document

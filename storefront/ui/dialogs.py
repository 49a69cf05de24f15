"""
Dialog and focus management for the cart drawer and the checkout modal.

Each surface is a two-state machine (closed/open). Opening a modal engages
a focus trap and suppresses body scroll; the trap's disposer is kept by the
surface and called on close.
"""
from enum import Enum
from typing import Callable, List, Optional, Tuple

from storefront.cart import CartStore
from storefront.logging import get_logger
from .document import Document, Element, Event
from .layout import ElementIds
from .notifications import ToastNotifier
from .renderer import ViewRenderer

logger = get_logger(__name__)

ORDER_PLACED_MESSAGE = "Order placed successfully! Thank you for your purchase."


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


def engage_focus_trap(surface: Element) -> Callable[[], None]:
    """
    Keep Tab / Shift+Tab cycling among the surface's interactive elements.

    Returns a function that removes the trap.
    """

    def handle_tab(event: Event) -> None:
        if event.key != "Tab":
            return
        focusable = surface.focusable_elements()
        if not focusable:
            return
        first, last = focusable[0], focusable[-1]
        active = surface.document.active_element if surface.document else None
        if event.shift_key:
            if active is first or active not in focusable:
                last.focus()
                event.prevent_default()
        elif active is last or active not in focusable:
            first.focus()
            event.prevent_default()

    return surface.add_event_listener("keydown", handle_tab)


class DialogSurface:
    """Open/close state for one dialog region of the page."""

    def __init__(
        self,
        document: Document,
        surface_id: str,
        open_class: str,
        *,
        modal: bool = False,
        trigger_id: Optional[str] = None,
        toggle_id: Optional[str] = None,
        toggle_labels: Tuple[str, str] = ("", ""),
        overlay_id: Optional[str] = None,
    ):
        self.document = document
        self.surface_id = surface_id
        self.open_class = open_class
        self.modal = modal
        self.trigger_id = trigger_id
        self.toggle_id = toggle_id
        # (label while open, label while closed)
        self.toggle_labels = toggle_labels
        self.overlay_id = overlay_id
        self.state = DialogState.CLOSED
        self._release_trap: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self.state is DialogState.OPEN

    def _element(self, element_id: Optional[str]) -> Optional[Element]:
        return self.document.get_element_by_id(element_id) if element_id else None

    def _set_toggle(self, expanded: bool) -> None:
        toggle = self._element(self.toggle_id)
        if toggle is None:
            return
        toggle.set_attribute("aria-expanded", "true" if expanded else "false")
        label = self.toggle_labels[0 if expanded else 1]
        if label:
            toggle.set_attribute("aria-label", label)

    def open(self) -> bool:
        """Show the surface. Returns False if it is missing from the page."""
        surface = self._element(self.surface_id)
        if surface is None:
            return False
        if self.is_open:
            return True

        self.state = DialogState.OPEN
        surface.add_class(self.open_class)
        overlay = self._element(self.overlay_id)
        if overlay is not None:
            overlay.add_class("active")
        self._set_toggle(True)

        if self.modal:
            self.document.body.style["overflow"] = "hidden"

        focusable = surface.focusable_elements()
        if focusable:
            focusable[0].focus()

        if self.modal:
            self._release_trap = engage_focus_trap(surface)
        return True

    def close(self) -> None:
        """Hide the surface and hand focus back to the control that opens it."""
        if not self.is_open:
            return

        self.state = DialogState.CLOSED
        surface = self._element(self.surface_id)
        if surface is not None:
            surface.remove_class(self.open_class)
        overlay = self._element(self.overlay_id)
        if overlay is not None:
            overlay.remove_class("active")
        self._set_toggle(False)

        if self.modal:
            self.document.body.style.pop("overflow", None)

        if self._release_trap is not None:
            self._release_trap()
            self._release_trap = None

        trigger = self._element(self.trigger_id)
        if trigger is not None:
            trigger.focus()


class DialogController:
    """Wires the drawer, the checkout modal and order placement."""

    def __init__(
        self,
        document: Document,
        store: CartStore,
        renderer: ViewRenderer,
        notifier: ToastNotifier,
    ):
        self.document = document
        self.store = store
        self.renderer = renderer
        self.notifier = notifier
        self.drawer = DialogSurface(
            document,
            ElementIds.CART_DRAWER,
            "open",
            trigger_id=ElementIds.CART_TOGGLE,
            toggle_id=ElementIds.CART_TOGGLE,
            toggle_labels=("Close shopping cart", "Open shopping cart"),
            overlay_id=ElementIds.CART_OVERLAY,
        )
        self.modal = DialogSurface(
            document,
            ElementIds.CHECKOUT_MODAL,
            "active",
            modal=True,
            trigger_id=ElementIds.CHECKOUT_BTN,
        )
        self._disposers: List[Callable[[], None]] = []

    def open_drawer(self) -> None:
        self.drawer.open()

    def close_drawer(self) -> None:
        self.drawer.close()

    def open_checkout(self) -> None:
        """Render the order summary and open the modal."""
        self.renderer.render_order_summary(self.store.snapshot())
        self.modal.open()

    def close_checkout(self) -> None:
        self.modal.close()

    def place_order(self) -> None:
        """Mock order placement: confirm, empty the cart, close both surfaces."""
        logger.info(f"Order placed: {self.store.item_count()} item(s), total {self.store.subtotal()}")
        self.notifier.show(ORDER_PLACED_MESSAGE)
        self.store.clear()
        self.close_checkout()
        self.close_drawer()

    def handle_keydown(self, event: Event) -> None:
        """Escape closes the modal first, then the drawer."""
        if event.key != "Escape":
            return
        if self.modal.is_open:
            self.close_checkout()
        elif self.drawer.is_open:
            self.close_drawer()

    def bind(self) -> None:
        """Attach click handlers to the dialog controls and the global key handler."""
        bindings = (
            (ElementIds.CART_TOGGLE, self.open_drawer),
            (ElementIds.CART_CLOSE, self.close_drawer),
            (ElementIds.CART_OVERLAY, self.close_drawer),
            (ElementIds.CHECKOUT_BTN, self.open_checkout),
            (ElementIds.MODAL_CLOSE, self.close_checkout),
            (ElementIds.MODAL_CANCEL, self.close_checkout),
            (ElementIds.PLACE_ORDER, self.place_order),
        )
        for element_id, action in bindings:
            element = self.document.get_element_by_id(element_id)
            if element is None:
                continue
            self._disposers.append(
                element.add_event_listener("click", lambda event, action=action: action())
            )
        self._disposers.append(self.document.add_event_listener("keydown", self.handle_keydown))

    def unbind(self) -> None:
        for dispose in self._disposers:
            dispose()
        self._disposers = []
        self.modal.close()
        self.drawer.close()

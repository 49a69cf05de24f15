"""
Storefront application - composition root.

Builds the store, renderer, notifier and dialog controller for one
document and wires the page controls to them. Nothing here is global:
callers own the StorefrontApp instance.
"""
import asyncio
from typing import Callable, List, Optional

from storefront.cart import CartPersistence, CartStore, KeyValueStorage, create_storage
from storefront.catalog import Catalog
from storefront.config import Settings, load_settings
from storefront.filters import FilterCriteria, criteria_from_controls, filter_products
from storefront.logging import get_logger
from storefront.ui import (
    DialogController,
    Document,
    ElementIds,
    ToastNotifier,
    ViewRenderer,
    build_document,
)

logger = get_logger(__name__)

WorkerRegistrar = Callable[[], object]


class StorefrontApp:
    """One storefront session bound to a document and a storage backend."""

    def __init__(
        self,
        document: Document,
        storage: KeyValueStorage,
        catalog: Optional[Catalog] = None,
        settings: Optional[Settings] = None,
        register_worker: Optional[WorkerRegistrar] = None,
    ):
        self.settings = settings or Settings()
        self.document = document
        self.catalog = catalog or Catalog()
        self.notifier = ToastNotifier(document, self.settings.toast_duration_ms)
        self.store = CartStore(
            self.catalog,
            CartPersistence(storage, self.settings.cart_key),
            notify=self.notifier.show,
        )
        self.renderer = ViewRenderer(document, self.store)
        self.dialogs = DialogController(document, self.store, self.renderer, self.notifier)
        self.criteria = FilterCriteria()
        self.visible_products = list(self.catalog)
        self._register_worker = register_worker
        self._disposers: List[Callable[[], None]] = []
        self._started = False

    def start(self) -> None:
        """Initial render and event wiring."""
        if self._started:
            return
        self._started = True

        self.renderer.render_products(self.visible_products)
        self.renderer.render(self.store.snapshot())
        self._disposers.append(self.store.subscribe(self.renderer.render))
        self._bind_filters()
        self.dialogs.bind()
        self._register_offline_worker()

    def stop(self) -> None:
        """Remove every handler and subscription added by start()."""
        for dispose in self._disposers:
            dispose()
        self._disposers = []
        self.dialogs.unbind()
        self._started = False

    # ---- filtering ---------------------------------------------------------

    def _control_value(self, element_id: str) -> str:
        element = self.document.get_element_by_id(element_id)
        return element.value if element is not None else ""

    def read_criteria(self) -> FilterCriteria:
        return criteria_from_controls(
            search=self._control_value(ElementIds.SEARCH_INPUT),
            price=self._control_value(ElementIds.PRICE_FILTER),
            sort=self._control_value(ElementIds.SORT_SELECT),
        )

    def apply_filters(self, criteria: Optional[FilterCriteria] = None) -> List:
        """Recompute the visible products and redraw the grid."""
        self.criteria = criteria if criteria is not None else self.read_criteria()
        self.visible_products = filter_products(self.catalog, self.criteria)
        self.renderer.render_products(self.visible_products)
        return self.visible_products

    def _bind_filters(self) -> None:
        for element_id, event_type in (
            (ElementIds.SEARCH_INPUT, "input"),
            (ElementIds.PRICE_FILTER, "change"),
            (ElementIds.SORT_SELECT, "change"),
        ):
            element = self.document.get_element_by_id(element_id)
            if element is None:
                continue
            self._disposers.append(
                element.add_event_listener(event_type, lambda event: self.apply_filters())
            )

    # ---- offline worker ----------------------------------------------------

    def _register_offline_worker(self) -> None:
        """Best-effort registration; failures are logged only."""
        if self._register_worker is None:
            return
        try:
            registration = self._register_worker()
            logger.info(f"Offline worker registered: {registration}")
        except Exception as e:
            logger.warning(f"Offline worker registration failed: {e}")


def create_app(
    settings: Optional[Settings] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    register_worker: Optional[WorkerRegistrar] = None,
) -> StorefrontApp:
    """Build a started app on the default page with the configured storage."""
    settings = settings or load_settings()
    app = StorefrontApp(
        document=build_document(loop=loop),
        storage=create_storage(settings),
        settings=settings,
        register_worker=register_worker,
    )
    app.start()
    return app

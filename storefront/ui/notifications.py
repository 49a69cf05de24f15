"""Toast notifications."""
from storefront.config import DEFAULT_TOAST_MS
from storefront.logging import get_logger, sanitize_string_for_logging
from .document import Document
from .layout import ElementIds

logger = get_logger(__name__)


class ToastNotifier:
    """
    Shows a message in the toast surface and hides it after a delay.

    The element is looked up again when the timer fires, so removing the
    toast from the page in the meantime is harmless. Showing a new message
    restarts the countdown.
    """

    def __init__(self, document: Document, duration_ms: int = DEFAULT_TOAST_MS):
        self.document = document
        self.duration_ms = duration_ms
        self._pending = None

    def show(self, message: str) -> None:
        toast = self.document.get_element_by_id(ElementIds.TOAST)
        toast_message = self.document.get_element_by_id(ElementIds.TOAST_MESSAGE)
        if toast is None or toast_message is None:
            logger.debug(f"No toast surface for: {sanitize_string_for_logging(message)}")
            return

        toast_message.text = message
        toast.add_class("show")

        if self._pending is not None:
            self.document.clear_timeout(self._pending)
        self._pending = self.document.set_timeout(self.duration_ms, self._dismiss)

    def _dismiss(self) -> None:
        self._pending = None
        toast = self.document.get_element_by_id(ElementIds.TOAST)
        if toast is not None:
            toast.remove_class("show")

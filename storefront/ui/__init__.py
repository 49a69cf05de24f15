"""Rendering target, views and dialog handling."""
from .dialogs import DialogController, DialogState, DialogSurface, engage_focus_trap
from .document import Document, Element, Event
from .layout import ElementIds, build_document
from .notifications import ToastNotifier
from .renderer import ViewRenderer

__all__ = [
    "DialogController",
    "DialogState",
    "DialogSurface",
    "engage_focus_trap",
    "Document",
    "Element",
    "Event",
    "ElementIds",
    "build_document",
    "ToastNotifier",
    "ViewRenderer",
]

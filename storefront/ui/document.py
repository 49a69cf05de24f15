"""
In-process document tree used as the rendering target.

Elements carry an id, classes, attributes, inline style, text and children.
Events bubble from the target through its ancestors to the document. The
document tracks the focused element, performs the default Tab traversal
when a keydown is not cancelled, and runs timers either on an asyncio loop
or on a virtual clock advanced by `advance()`.
"""
import asyncio
import heapq
import html
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

EventHandler = Callable[["Event"], None]

FOCUSABLE_TAGS = frozenset({"button", "input", "select", "textarea"})
VOID_TAGS = frozenset({"img", "input"})


@dataclass
class Event:
    """A dispatched UI event."""
    type: str
    key: str = ""
    shift_key: bool = False
    target: Optional["Element"] = None
    current_target: Any = None
    default_prevented: bool = False
    propagation_stopped: bool = False
    detail: Dict[str, Any] = field(default_factory=dict)

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class _Listeners:
    """Per-node listener registry."""

    def __init__(self):
        self._by_type: Dict[str, List[EventHandler]] = {}

    def add(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        self._by_type.setdefault(event_type, []).append(handler)
        return lambda: self.remove(event_type, handler)

    def remove(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._by_type.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def count(self, event_type: str) -> int:
        return len(self._by_type.get(event_type, []))

    def fire(self, event: Event) -> None:
        for handler in list(self._by_type.get(event.type, [])):
            handler(event)


class Element:
    """A node in the document tree."""

    def __init__(
        self,
        tag: str,
        *children: "Element",
        id: Optional[str] = None,
        classes=(),
        attrs: Optional[Dict[str, str]] = None,
        text: str = "",
    ):
        self.tag = tag
        self.id = id
        self.class_list: List[str] = list(classes)
        self.attributes: Dict[str, str] = dict(attrs or {})
        self.style: Dict[str, str] = {}
        self.text = text
        self.children: List[Element] = []
        self.parent: Optional[Element] = None
        self._document: Optional["Document"] = None
        self._listeners = _Listeners()
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        return f"<Element {self.tag}{ident}>"

    # ---- tree ------------------------------------------------------------

    @property
    def document(self) -> Optional["Document"]:
        return self._document

    def _attach(self, document: Optional["Document"]) -> None:
        for node in self.iter():
            node._document = document

    def append(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.remove()
        child.parent = self
        self.children.append(child)
        child._attach(self._document)
        return child

    def remove(self) -> None:
        if self.parent is None:
            return
        document = self._document
        self.parent.children.remove(self)
        self.parent = None
        if document is not None and document.active_element in list(self.iter()):
            document.active_element = None
        self._attach(None)

    def replace_children(self, *children: "Element") -> None:
        """Drop all current children (and their listeners) and insert new ones."""
        for child in list(self.children):
            child.remove()
        for child in children:
            self.append(child)

    def iter(self) -> Iterator["Element"]:
        """Depth-first, document-order walk including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def contains(self, other: Optional["Element"]) -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def find_by_class(self, class_name: str) -> List["Element"]:
        return [node for node in self.iter() if class_name in node.class_list and node is not self]

    def find_by_tag(self, tag: str) -> List["Element"]:
        return [node for node in self.iter() if node.tag == tag and node is not self]

    def focusable_elements(self) -> List["Element"]:
        """Interactive descendants, in document order."""
        return [node for node in self.iter() if node is not self and node.is_focusable]

    # ---- attributes ------------------------------------------------------

    @property
    def is_focusable(self) -> bool:
        if self.attributes.get("disabled") is not None and self.tag in FOCUSABLE_TAGS:
            return False
        tabindex = self.attributes.get("tabindex")
        if tabindex is not None:
            return tabindex != "-1"
        return self.tag in FOCUSABLE_TAGS

    @property
    def value(self) -> str:
        return self.attributes.get("value", "")

    @value.setter
    def value(self, new_value: str) -> None:
        self.attributes["value"] = new_value

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def add_class(self, class_name: str) -> None:
        if class_name not in self.class_list:
            self.class_list.append(class_name)

    def remove_class(self, class_name: str) -> None:
        if class_name in self.class_list:
            self.class_list.remove(class_name)

    def has_class(self, class_name: str) -> bool:
        return class_name in self.class_list

    @property
    def text_content(self) -> str:
        return self.text + "".join(child.text_content for child in self.children)

    # ---- events and focus --------------------------------------------------

    def add_event_listener(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler; returns a function that removes it."""
        return self._listeners.add(event_type, handler)

    def remove_event_listener(self, event_type: str, handler: EventHandler) -> None:
        self._listeners.remove(event_type, handler)

    def listener_count(self, event_type: str) -> int:
        return self._listeners.count(event_type)

    def dispatch_event(self, event: Event) -> Event:
        """Deliver event to this element, its ancestors, then the document."""
        event.target = self
        node: Optional[Element] = self
        while node is not None and not event.propagation_stopped:
            event.current_target = node
            node._listeners.fire(event)
            node = node.parent
        if self._document is not None and not event.propagation_stopped:
            event.current_target = self._document
            self._document._listeners.fire(event)
        return event

    def click(self) -> Event:
        return self.dispatch_event(Event("click"))

    def focus(self) -> None:
        """Move focus here; detached elements cannot take focus."""
        if self._document is not None:
            self._document.active_element = self

    # ---- serialization -----------------------------------------------------

    def to_html(self) -> str:
        attrs = []
        if self.id:
            attrs.append(f'id="{html.escape(self.id)}"')
        if self.class_list:
            attrs.append(f'class="{html.escape(" ".join(self.class_list))}"')
        for name, value in self.attributes.items():
            attrs.append(f'{name}="{html.escape(str(value))}"')
        if self.style:
            css = "; ".join(f"{k}: {v}" for k, v in self.style.items())
            attrs.append(f'style="{html.escape(css)}"')
        opening = f"<{self.tag}{' ' if attrs else ''}{' '.join(attrs)}>"
        if self.tag in VOID_TAGS:
            return opening
        inner = html.escape(self.text) + "".join(child.to_html() for child in self.children)
        return f"{opening}{inner}</{self.tag}>"


class Document:
    """Root of an element tree plus focus, global listeners and timers."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.body = Element("body")
        self.body._document = self
        self.active_element: Optional[Element] = None
        self._listeners = _Listeners()
        self._loop = loop
        self._now_ms = 0
        self._timers: list = []
        self._timer_seq = itertools.count()
        self._cancelled: set = set()

    # ---- lookup ------------------------------------------------------------

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for node in self.body.iter():
            if node.id == element_id:
                return node
        return None

    # ---- events --------------------------------------------------------------

    def add_event_listener(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        return self._listeners.add(event_type, handler)

    def remove_event_listener(self, event_type: str, handler: EventHandler) -> None:
        self._listeners.remove(event_type, handler)

    def listener_count(self, event_type: str) -> int:
        return self._listeners.count(event_type)

    def press_key(self, key: str, shift: bool = False) -> Event:
        """Dispatch a keydown at the focused element (or body)."""
        target = self.active_element or self.body
        event = target.dispatch_event(Event("keydown", key=key, shift_key=shift))
        if key == "Tab" and not event.default_prevented:
            self._move_focus(backwards=shift)
        return event

    def _move_focus(self, backwards: bool) -> None:
        focusable = self.body.focusable_elements()
        if not focusable:
            return
        if self.active_element not in focusable:
            self.active_element = focusable[-1 if backwards else 0]
            return
        index = focusable.index(self.active_element)
        index = (index - 1 if backwards else index + 1) % len(focusable)
        self.active_element = focusable[index]

    # ---- timers --------------------------------------------------------------

    def set_timeout(self, delay_ms: int, callback: Callable[[], None]):
        """Run callback after delay_ms; returns a handle for clear_timeout."""
        if self._loop is not None:
            return self._loop.call_later(delay_ms / 1000, callback)
        handle = next(self._timer_seq)
        heapq.heappush(self._timers, (self._now_ms + delay_ms, handle, callback))
        return handle

    def clear_timeout(self, handle) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()
        elif handle is not None:
            self._cancelled.add(handle)

    def advance(self, ms: int) -> None:
        """Move the virtual clock forward, running every timer that falls due."""
        deadline = self._now_ms + ms
        while self._timers and self._timers[0][0] <= deadline:
            due, handle, callback = heapq.heappop(self._timers)
            self._now_ms = due
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
        self._now_ms = deadline

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, handle, _ in self._timers if handle not in self._cancelled)

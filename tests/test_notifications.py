"""Tests for toast notifications"""
import asyncio

import pytest

from storefront.ui import ElementIds, ToastNotifier, build_document


@pytest.fixture
def notifier(document):
    """Notifier with the default 3000ms duration"""
    return ToastNotifier(document)


def test_show_sets_message(document, notifier):
    """Test showing a toast"""
    notifier.show("Bluetooth Speaker added to cart!")

    toast = document.get_element_by_id(ElementIds.TOAST)
    assert toast.has_class("show")
    assert document.get_element_by_id(ElementIds.TOAST_MESSAGE).text == "Bluetooth Speaker added to cart!"


def test_auto_dismiss_after_3000ms(document, notifier):
    """Test the toast hides once the delay passes"""
    notifier.show("hello")
    toast = document.get_element_by_id(ElementIds.TOAST)

    document.advance(2999)
    assert toast.has_class("show")

    document.advance(1)
    assert not toast.has_class("show")


def test_new_message_restarts_countdown(document, notifier):
    """Test a second toast gets its own full duration"""
    toast = document.get_element_by_id(ElementIds.TOAST)
    notifier.show("first")
    document.advance(2000)

    notifier.show("second")
    document.advance(2000)

    assert toast.has_class("show")
    assert document.pending_timers == 1

    document.advance(1000)
    assert not toast.has_class("show")


def test_dismiss_after_surface_removed(document, notifier):
    """Test dismissal does not fail if the toast left the page"""
    notifier.show("hello")
    document.get_element_by_id(ElementIds.TOAST).remove()

    document.advance(3000)

    assert document.get_element_by_id(ElementIds.TOAST) is None


def test_show_without_surface_is_noop(document, notifier):
    """Test showing with no toast element schedules nothing"""
    document.get_element_by_id(ElementIds.TOAST).remove()

    notifier.show("hello")

    assert document.pending_timers == 0


@pytest.mark.asyncio
async def test_dismiss_on_event_loop():
    """Test a loop-bound document schedules with call_later"""
    document = build_document(loop=asyncio.get_running_loop())
    notifier = ToastNotifier(document, duration_ms=10)
    toast = document.get_element_by_id(ElementIds.TOAST)

    notifier.show("hello")
    assert toast.has_class("show")

    await asyncio.sleep(0.05)
    assert not toast.has_class("show")

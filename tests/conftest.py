"""Pytest configuration and fixtures"""
import os
from unittest.mock import Mock

import pytest

# Keep tests away from any developer .env / real Redis
os.environ.setdefault("STOREFRONT_STORAGE", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from storefront.app import StorefrontApp
from storefront.cart import CartPersistence, CartStore, MemoryStorage
from storefront.catalog import Catalog
from storefront.config import Settings
from storefront.errors import StorageError
from storefront.ui import build_document

CART_KEY = "arcadia-cart"


@pytest.fixture
def catalog():
    """The 8-item sample catalog"""
    return Catalog()


@pytest.fixture
def storage():
    """Empty in-memory storage"""
    return MemoryStorage()


@pytest.fixture
def persistence(storage):
    return CartPersistence(storage, CART_KEY)


@pytest.fixture
def notifications():
    """Collects messages passed to the store's notify callback"""
    return []


@pytest.fixture
def store(catalog, persistence, notifications):
    """Cart store over empty memory storage"""
    return CartStore(catalog, persistence, notify=notifications.append)


@pytest.fixture
def failing_storage():
    """Storage whose reads and writes always fail"""
    backend = Mock()
    backend.get.side_effect = StorageError("connection refused")
    backend.set.side_effect = StorageError("connection refused")
    return backend


@pytest.fixture
def document():
    """Default storefront page on a virtual clock"""
    return build_document()


@pytest.fixture
def settings():
    return Settings(cart_key=CART_KEY)


@pytest.fixture
def app(document, storage, catalog, settings):
    """Started storefront app"""
    storefront = StorefrontApp(document, storage, catalog=catalog, settings=settings)
    storefront.start()
    yield storefront
    storefront.stop()

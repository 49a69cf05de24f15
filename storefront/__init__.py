"""Arcadia storefront: catalog, filtering, persistent cart and mock checkout."""
from storefront.app import StorefrontApp, create_app

__all__ = ["StorefrontApp", "create_app"]

__version__ = "1.0.0"

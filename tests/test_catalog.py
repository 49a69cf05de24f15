"""
Tests for the product catalog
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.catalog import Catalog, Product


class TestCatalog:
    """Tests for Catalog lookups."""

    def test_sample_catalog(self, catalog):
        """Test the 8 sample products load with Decimal prices."""
        assert len(catalog) == 8
        assert catalog.get(6).name == "Smart Fitness Watch"
        assert catalog.get(6).price == Decimal("249.99")

    def test_unknown_id(self, catalog):
        """Test missing ids resolve to None."""
        assert catalog.get(0) is None
        assert 42 not in catalog

    def test_duplicate_ids_rejected(self):
        """Test ids must be unique."""
        product = Product(id=1, name="A", price="1", image="a", category="c")

        with pytest.raises(ValueError):
            Catalog([product, product])


class TestProduct:
    """Tests for the Product model."""

    def test_products_are_immutable(self, catalog):
        """Test catalog records cannot be changed."""
        with pytest.raises(ValidationError):
            catalog.get(1).price = Decimal("1")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product(id=1, name="A", price="-1", image="a", category="c")

    def test_non_positive_id_rejected(self):
        with pytest.raises(ValidationError):
            Product(id=0, name="A", price="1", image="a", category="c")

    @pytest.mark.parametrize("price", ["abc", "", None])
    def test_unparseable_price_rejected(self, price):
        """Test a bad price is a validation error, not a free product."""
        with pytest.raises(ValidationError):
            Product(id=1, name="A", price=price, image="a", category="c")

"""
Product filtering and sorting.

`filter_products` is a pure function of the catalog and the current
criteria; it is recomputed from scratch on every control change.
"""
import locale
from decimal import Decimal
from enum import Enum
from typing import Iterable, List

from pydantic import BaseModel, field_validator

from storefront.catalog import Product


class PriceRange(str, Enum):
    """Price bands offered by the price filter control."""
    ANY = ""
    UP_TO_25 = "0-25"  # [0, 25]
    FROM_25_TO_50 = "25-50"  # (25, 50]
    FROM_50_TO_100 = "50-100"  # (50, 100]
    OVER_100 = "100+"  # (100, inf)

    @classmethod
    def parse(cls, value) -> "PriceRange":
        """Unknown or empty values mean no price filter."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value or "")
        except ValueError:
            return cls.ANY

    def matches(self, price: Decimal) -> bool:
        if self is PriceRange.UP_TO_25:
            return 0 <= price <= 25
        if self is PriceRange.FROM_25_TO_50:
            return 25 < price <= 50
        if self is PriceRange.FROM_50_TO_100:
            return 50 < price <= 100
        if self is PriceRange.OVER_100:
            return price > 100
        return True


class SortKey(str, Enum):
    """Product orderings."""
    NAME = "name"
    PRICE_ASCENDING = "price-ascending"
    PRICE_DESCENDING = "price-descending"

    @classmethod
    def parse(cls, value) -> "SortKey":
        """Map a control value to a key; anything unrecognized sorts by name."""
        if isinstance(value, cls):
            return value
        if value in _SORT_ALIASES:
            return _SORT_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            return cls.NAME


# Values used by the sort <select> in the page markup
_SORT_ALIASES = {
    "price-low": SortKey.PRICE_ASCENDING,
    "price-high": SortKey.PRICE_DESCENDING,
}


class FilterCriteria(BaseModel):
    """Current search/price/sort selection."""
    search_term: str = ""
    price_range: PriceRange = PriceRange.ANY
    sort_key: SortKey = SortKey.NAME

    @field_validator("search_term", mode="before")
    @classmethod
    def convert_search_term(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("price_range", mode="before")
    @classmethod
    def convert_price_range(cls, v):
        return PriceRange.parse(v)

    @field_validator("sort_key", mode="before")
    @classmethod
    def convert_sort_key(cls, v):
        return SortKey.parse(v)


def criteria_from_controls(search: str = "", price: str = "", sort: str = "") -> FilterCriteria:
    """Build criteria from raw control values (empty sort means name)."""
    return FilterCriteria(search_term=search, price_range=price, sort_key=sort or SortKey.NAME)


def matches_search(product: Product, term: str) -> bool:
    """Case-insensitive substring match on the product name."""
    if not term:
        return True
    return term.casefold() in product.name.casefold()


def _name_key(product: Product):
    # Case-folded first so "apple" and "Apple" sit together, then the
    # collation of the active locale breaks ties.
    return (locale.strxfrm(product.name.casefold()), locale.strxfrm(product.name))


def sort_products(products: Iterable[Product], sort_key: SortKey) -> List[Product]:
    """Return products in the requested order (stable)."""
    if sort_key is SortKey.PRICE_ASCENDING:
        return sorted(products, key=lambda p: p.price)
    if sort_key is SortKey.PRICE_DESCENDING:
        return sorted(products, key=lambda p: p.price, reverse=True)
    return sorted(products, key=_name_key)


def filter_products(products: Iterable[Product], criteria: FilterCriteria) -> List[Product]:
    """Products passing both the search and the price predicate, sorted."""
    matching = [
        product
        for product in products
        if matches_search(product, criteria.search_term)
        and criteria.price_range.matches(product.price)
    ]
    return sort_products(matching, criteria.sort_key)

"""Product catalog - static, read-only product records."""
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.money import parse_price


class Product(BaseModel):
    """Product model."""
    id: int = Field(gt=0)
    name: str
    price: Decimal = Field(ge=0)
    image: str
    category: str

    class Config:
        frozen = True

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return parse_price(v)


SAMPLE_PRODUCTS: tuple = (
    Product(id=1, name="Premium Wireless Headphones", price="199.99",
            image="https://picsum.photos/seed/headphones/400/300", category="electronics"),
    Product(id=2, name="Organic Cotton T-Shirt", price="29.99",
            image="https://picsum.photos/seed/tshirt/400/300", category="clothing"),
    Product(id=3, name="Stainless Steel Water Bottle", price="24.99",
            image="https://picsum.photos/seed/bottle/400/300", category="accessories"),
    Product(id=4, name="Bluetooth Speaker", price="89.99",
            image="https://picsum.photos/seed/speaker/400/300", category="electronics"),
    Product(id=5, name="Leather Crossbody Bag", price="79.99",
            image="https://picsum.photos/seed/bag/400/300", category="accessories"),
    Product(id=6, name="Smart Fitness Watch", price="249.99",
            image="https://picsum.photos/seed/watch/400/300", category="electronics"),
    Product(id=7, name="Cozy Knit Sweater", price="59.99",
            image="https://picsum.photos/seed/sweater/400/300", category="clothing"),
    Product(id=8, name="Wireless Phone Charger", price="34.99",
            image="https://picsum.photos/seed/charger/400/300", category="electronics"),
)


class Catalog:
    """
    Read-only, ordered collection of products.

    Product ids must be unique; iteration follows the order the products
    were given in.
    """

    def __init__(self, products: Iterable[Product] = SAMPLE_PRODUCTS):
        self._products = tuple(products)
        self._by_id = {}
        for product in self._products:
            if product.id in self._by_id:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._by_id[product.id] = product

    def get(self, product_id: int) -> Optional[Product]:
        """Return the product with this id, or None."""
        return self._by_id.get(product_id)

    @property
    def products(self) -> tuple:
        return self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

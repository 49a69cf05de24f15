"""
Common Error Constants

Centralized error messages shared by storage backends and the cart store.
"""

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_STORAGE_MISCONFIGURED = "Cart storage misconfigured"

# Cart payload errors
ERROR_CART_CORRUPTED = "Corrupted cart data"


class StorageError(ValueError):
    """Raised by storage backends when a read or write cannot be completed."""

    def __init__(self, detail: str):
        super().__init__(f"{ERROR_STORAGE_UNAVAILABLE}: {detail}")
        self.detail = detail

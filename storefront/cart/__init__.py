"""Cart package: models, storage, and store."""
from .models import CartLine, CartSnapshot
from .service import CartStore
from .storage import (
    CartPersistence,
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    UpstashStorage,
    create_storage,
)

__all__ = [
    "CartLine",
    "CartSnapshot",
    "CartStore",
    "CartPersistence",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "UpstashStorage",
    "create_storage",
]

"""
Cart persistence: string key-value storage backends and the cart adapter.

A backend is anything with ``get(key) -> str | None`` and
``set(key, value)``. Backends raise StorageError on failure; CartPersistence
swallows and logs those so the cart keeps working in memory.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from upstash_redis import Redis

from storefront.config import Settings
from storefront.errors import (
    ERROR_CART_CORRUPTED,
    ERROR_STORAGE_MISCONFIGURED,
    StorageError,
)
from storefront.logging import get_logger, sanitize_string_for_logging
from .models import CartLine

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Single-process, synchronous string storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage; contents live as long as the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """
    Stores every key in a single JSON object on disk.

    Writes go through a temporary file and os.replace so a crash mid-write
    leaves the previous contents intact.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageError:
            logger.warning(f"Overwriting unreadable storage file {self.path}")
            data = {}
        data[key] = value
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"cannot write {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                self._discard(tmp_name)

    def _discard(self, tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_name}: {e}")


class UpstashStorage:
    """Storage on an Upstash Redis database (REST API, sync client)."""

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_credentials(cls, url: str, token: str) -> "UpstashStorage":
        if not url or not token:
            raise ValueError(
                f"{ERROR_STORAGE_MISCONFIGURED}: UPSTASH_REDIS_REST_URL and "
                "UPSTASH_REDIS_REST_TOKEN must be set"
            )
        return cls(Redis(url=url, token=token))

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except Exception as e:
            raise StorageError(f"Redis GET failed: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis SET failed: {e}") from e


def create_storage(settings: Settings) -> KeyValueStorage:
    """Build the storage backend selected in settings."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "file":
        return JsonFileStorage(settings.cart_file)
    if settings.storage_backend == "upstash":
        return UpstashStorage.from_credentials(
            settings.upstash_redis_rest_url,
            settings.upstash_redis_rest_token,
        )
    raise ValueError(f"{ERROR_STORAGE_MISCONFIGURED}: unknown backend {settings.storage_backend!r}")


def decode_cart(payload: str) -> List[CartLine]:
    """
    Parse a persisted cart payload.

    Raises:
        ValueError: If the payload is not a JSON array of valid, unique lines.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ValueError(f"not JSON: {e}") from e
    except RecursionError as e:
        raise ValueError("cart payload is nested too deeply") from e
    if not isinstance(data, list):
        raise ValueError("cart payload must be a JSON array")

    lines: List[CartLine] = []
    seen = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("cart line must be a JSON object")
        try:
            line = CartLine.from_dict(entry)
        except (KeyError, TypeError) as e:
            raise ValueError(f"invalid cart line: {e}") from e
        if line.id in seen:
            raise ValueError(f"duplicate cart line for product {line.id}")
        seen.add(line.id)
        lines.append(line)
    return lines


def encode_cart(lines: Sequence[CartLine]) -> str:
    return json.dumps([line.to_dict() for line in lines])


class CartPersistence:
    """Reads and writes the cart in one storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str):
        self.storage = storage
        self.key = key

    def load(self) -> List[CartLine]:
        """Load persisted lines; any failure yields an empty cart."""
        try:
            payload = self.storage.get(self.key)
        except Exception as e:
            logger.error(f"Failed to load cart from storage: {e}")
            return []

        if not payload:
            return []

        try:
            return decode_cart(payload)
        except ValueError as e:
            logger.warning(
                f"{ERROR_CART_CORRUPTED} under key {sanitize_string_for_logging(self.key)}: {e}"
            )
            return []

    def save(self, lines: Sequence[CartLine]) -> bool:
        """Overwrite the slot with the full cart. Returns False on failure."""
        try:
            self.storage.set(self.key, encode_cart(lines))
            return True
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}")
            return False

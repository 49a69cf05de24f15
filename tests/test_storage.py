"""Tests for cart persistence and storage backends"""
import json
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from storefront.cart import (
    CartLine,
    CartPersistence,
    JsonFileStorage,
    MemoryStorage,
    UpstashStorage,
    create_storage,
)
from storefront.cart.storage import decode_cart, encode_cart
from storefront.config import Settings
from storefront.errors import StorageError

CART_KEY = "arcadia-cart"


@pytest.fixture
def lines():
    return [
        CartLine(id=6, name="Smart Fitness Watch", price=Decimal("249.99"), image="w.png", quantity=2),
        CartLine(id=3, name="Stainless Steel Water Bottle", price=Decimal("24.99"), image="b.png", quantity=1),
    ]


class TestCartPersistence:
    """Tests for the persistence adapter."""

    def test_round_trip(self, persistence, lines):
        """Test saving then loading reproduces equal lines in order."""
        assert persistence.save(lines) is True

        assert persistence.load() == lines

    def test_missing_slot_loads_empty(self, persistence):
        """Test an absent key means an empty cart."""
        assert persistence.load() == []

    @pytest.mark.parametrize("payload", [
        "{not json",
        "null",
        '{"id": 1}',
        "[1, 2]",
        '[{"id": 1, "name": "A", "price": "1.00", "img": "a"}]',
        '[{"id": 1, "name": "A", "price": "1.00", "img": "a", "qty": 1},'
        ' {"id": 1, "name": "A", "price": "1.00", "img": "a", "qty": 2}]',
        '[{"id": 1, "name": "A", "price": "1e30", "img": "a", "qty": 1}]',
        "[" * 100000 + "]" * 100000,
    ])
    def test_malformed_payload_loads_empty(self, payload):
        """Test corrupt payloads fall back to an empty cart."""
        persistence = CartPersistence(MemoryStorage({CART_KEY: payload}), CART_KEY)

        assert persistence.load() == []

    def test_loads_payload_written_with_float_prices(self):
        """Test carts saved with numeric prices still load."""
        payload = json.dumps([{"id": 1, "name": "Premium Wireless Headphones",
                               "price": 199.99, "img": "h.png", "qty": 3}])
        persistence = CartPersistence(MemoryStorage({CART_KEY: payload}), CART_KEY)

        loaded = persistence.load()

        assert loaded[0].price == Decimal("199.99")
        assert loaded[0].quantity == 3

    def test_read_failure_is_swallowed(self, failing_storage):
        """Test a storage error on read yields an empty cart."""
        persistence = CartPersistence(failing_storage, CART_KEY)

        assert persistence.load() == []

    def test_write_failure_is_swallowed(self, failing_storage, lines):
        """Test a storage error on write returns False instead of raising."""
        persistence = CartPersistence(failing_storage, CART_KEY)

        assert persistence.save(lines) is False

    def test_encoded_payload_shape(self, lines):
        """Test the stored JSON array shape."""
        data = json.loads(encode_cart(lines))

        assert data[0] == {"id": 6, "name": "Smart Fitness Watch", "price": "249.99", "img": "w.png", "qty": 2}
        assert decode_cart(encode_cart(lines)) == lines


class TestJsonFileStorage:
    """Tests for the file backend."""

    def test_get_missing_file(self, tmp_path):
        """Test reading before anything was written."""
        storage = JsonFileStorage(tmp_path / "store.json")

        assert storage.get(CART_KEY) is None

    def test_set_then_get(self, tmp_path):
        """Test values survive a new storage object."""
        path = tmp_path / "nested" / "store.json"
        JsonFileStorage(path).set(CART_KEY, "[]")
        JsonFileStorage(path).set("other", "x")

        storage = JsonFileStorage(path)
        assert storage.get(CART_KEY) == "[]"
        assert storage.get("other") == "x"

    def test_unreadable_file_raises_storage_error(self, tmp_path):
        """Test a corrupt file surfaces as StorageError on read."""
        path = tmp_path / "store.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(path).get(CART_KEY)

    def test_set_overwrites_corrupt_file(self, tmp_path):
        """Test writing replaces an unreadable file."""
        path = tmp_path / "store.json"
        path.write_text("{oops", encoding="utf-8")

        JsonFileStorage(path).set(CART_KEY, "[]")

        assert json.loads(path.read_text(encoding="utf-8")) == {CART_KEY: "[]"}

    def test_deeply_nested_file_is_recoverable(self, tmp_path):
        """Test a file too deep to parse reads as StorageError and can be overwritten."""
        path = tmp_path / "store.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        storage = JsonFileStorage(path)

        with pytest.raises(StorageError):
            storage.get(CART_KEY)

        storage.set(CART_KEY, "[]")
        assert storage.get(CART_KEY) == "[]"

    def test_failed_write_leaves_no_temp_file(self, tmp_path):
        """Test a failed replace removes the temporary file and keeps the old contents."""
        path = tmp_path / "store.json"
        storage = JsonFileStorage(path)
        storage.set(CART_KEY, "[]")

        with patch("storefront.cart.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError):
                storage.set(CART_KEY, '[{"id": 1}]')

        assert list(tmp_path.glob("*.tmp")) == []
        assert storage.get(CART_KEY) == "[]"

    def test_persistence_round_trip_on_disk(self, tmp_path, lines):
        """Test the adapter over the file backend."""
        path = tmp_path / "store.json"
        CartPersistence(JsonFileStorage(path), CART_KEY).save(lines)

        assert CartPersistence(JsonFileStorage(path), CART_KEY).load() == lines


class TestUpstashStorage:
    """Tests for the Upstash Redis backend."""

    def test_get_and_set_delegate_to_client(self):
        """Test calls reach the Redis client."""
        client = Mock()
        client.get.return_value = "[]"
        storage = UpstashStorage(client)

        storage.set(CART_KEY, "[]")

        assert storage.get(CART_KEY) == "[]"
        client.set.assert_called_once_with(CART_KEY, "[]")
        client.get.assert_called_once_with(CART_KEY)

    def test_client_errors_become_storage_errors(self):
        """Test transport failures are wrapped."""
        client = Mock()
        client.get.side_effect = RuntimeError("timeout")
        client.set.side_effect = RuntimeError("timeout")
        storage = UpstashStorage(client)

        with pytest.raises(StorageError):
            storage.get(CART_KEY)
        with pytest.raises(StorageError):
            storage.set(CART_KEY, "[]")

    def test_from_credentials_requires_both(self):
        """Test missing credentials are a configuration error."""
        with pytest.raises(ValueError):
            UpstashStorage.from_credentials("https://example.upstash.io", "")

    def test_from_credentials_builds_client(self):
        """Test the client is created with url and token."""
        with patch("storefront.cart.storage.Redis") as redis_cls:
            UpstashStorage.from_credentials("https://example.upstash.io", "token")

        redis_cls.assert_called_once_with(url="https://example.upstash.io", token="token")


class TestCreateStorage:
    """Tests for backend selection."""

    def test_memory(self):
        assert isinstance(create_storage(Settings(storage_backend="memory")), MemoryStorage)

    def test_file(self, tmp_path):
        storage = create_storage(Settings(storage_backend="file", cart_file=str(tmp_path / "s.json")))

        assert isinstance(storage, JsonFileStorage)
        assert storage.path == tmp_path / "s.json"

    def test_upstash_without_credentials(self):
        with pytest.raises(ValueError):
            create_storage(Settings(storage_backend="upstash"))

"""
Durable cart slot.

The whole line-item sequence is stored as a JSON array under a single
fixed key and fully overwritten on every save. ``save`` and ``load`` never
raise: failures are logged and degrade to "nothing saved" / "empty cart".
"""
import json
from typing import Dict, List, Optional, Protocol, Sequence

from storefront.cart.models import LineItem
from storefront.config import CartSettings, DEFAULT_STORAGE_KEY
from storefront.db import RedisKeys, get_redis
from storefront.errors import (
    CartRecordError,
    ConfigurationError,
    ERROR_CART_NOT_A_LIST,
    ERROR_UNKNOWN_BACKEND,
)
from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """A string key-value slot (browser-storage-like)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local slot, used in tests and as the default backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class RedisStore:
    """Upstash Redis slot with a TTL for abandoned carts."""

    def __init__(self, settings: CartSettings, client=None):
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_redis(self.settings)
        return self._client

    def get(self, key: str) -> Optional[str]:
        return self.client.get(RedisKeys.cart_key(key))

    def set(self, key: str, value: str) -> None:
        self.client.set(RedisKeys.cart_key(key), value, ex=self.settings.ttl_seconds)

    def delete(self, key: str) -> None:
        self.client.delete(RedisKeys.cart_key(key))


def encode_cart(items: Sequence[LineItem]) -> str:
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def decode_cart(raw: str) -> List[LineItem]:
    """
    Decode a stored cart.

    Raises ValueError (json.JSONDecodeError) for unparseable text,
    RecursionError for text nested too deeply to parse, and
    CartRecordError when the payload is not a list. Individual malformed
    records are skipped with a warning.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise CartRecordError(ERROR_CART_NOT_A_LIST)

    items: List[LineItem] = []
    for index, record in enumerate(data):
        try:
            items.append(LineItem.from_dict(record))
        except (CartRecordError, KeyError, TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Skipping malformed cart record #{index}: {sanitize_string_for_logging(str(e), 200)}")
    return items


class CartPersistence:
    """Serializes the cart to a key-value slot under a fixed key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.store = store
        self.key = key

    def save(self, items: Sequence[LineItem]) -> None:
        try:
            self.store.set(self.key, encode_cart(items))
        except Exception as e:
            logger.error(f"Failed to save cart: {e}")

    def load(self) -> List[LineItem]:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.error(f"Failed to read cart from storage: {e}")
            return []

        if not raw:
            return []

        try:
            return decode_cart(raw)
        except (CartRecordError, ValueError, RecursionError) as e:
            logger.warning(f"Corrupted cart data ({e}): {sanitize_string_for_logging(raw)}")
            return []

    def clear(self) -> None:
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.error(f"Failed to clear cart from storage: {e}")


def build_persistence(settings: CartSettings) -> CartPersistence:
    """Wire the configured backend."""
    if settings.storage_backend == "memory":
        store: KeyValueStore = InMemoryStore()
    elif settings.storage_backend == "redis":
        store = RedisStore(settings)
    else:
        raise ConfigurationError(f"{ERROR_UNKNOWN_BACKEND}: {settings.storage_backend!r}")
    return CartPersistence(store, key=settings.storage_key)

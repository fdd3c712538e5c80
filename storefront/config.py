"""Cart engine configuration read from environment variables."""
import os
from dataclasses import dataclass
from functools import cache
from typing import FrozenSet, Optional

from storefront.errors import ConfigurationError, ERROR_INVALID_INTEGER

DEFAULT_STORAGE_KEY = "dotflow-cart"
DEFAULT_TTL_SECONDS = 7 * 24 * 3600

# Catalog category ids (commerce API)
CLASSIC_PIZZA_CATEGORY_ID = 8
SPECIAL_PIZZA_CATEGORY_ID = 9
SWEET_PIZZA_CATEGORY_ID = 10

DEFAULT_SIZE_CUSTOMIZABLE_CATEGORY_IDS = frozenset({
    CLASSIC_PIZZA_CATEGORY_ID,
    SPECIAL_PIZZA_CATEGORY_ID,
    SWEET_PIZZA_CATEGORY_ID,
})


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{ERROR_INVALID_INTEGER} in {name}: {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return _parse_int(name, raw)


def _env_int_set(name: str, default: FrozenSet[int]) -> FrozenSet[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return frozenset(_parse_int(name, part) for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class CartSettings:
    """Settings for the cart engine."""
    storage_key: str = DEFAULT_STORAGE_KEY
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    storage_backend: str = "memory"
    redis_url: Optional[str] = None
    redis_token: Optional[str] = None
    size_customizable_category_ids: FrozenSet[int] = DEFAULT_SIZE_CUSTOMIZABLE_CATEGORY_IDS
    special_category_id: int = SPECIAL_PIZZA_CATEGORY_ID
    currency: str = "BRL"

    @classmethod
    def from_env(cls) -> "CartSettings":
        """Build settings from the current environment."""
        return cls(
            storage_key=os.environ.get("CART_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            ttl_seconds=_env_int("CART_TTL_SECONDS", DEFAULT_TTL_SECONDS),
            storage_backend=os.environ.get("CART_STORAGE_BACKEND", "memory").lower(),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL") or None,
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN") or None,
            size_customizable_category_ids=_env_int_set(
                "SIZE_CUSTOMIZABLE_CATEGORY_IDS", DEFAULT_SIZE_CUSTOMIZABLE_CATEGORY_IDS
            ),
            special_category_id=_env_int("SPECIAL_CATEGORY_ID", SPECIAL_PIZZA_CATEGORY_ID),
            currency=os.environ.get("CURRENCY", "BRL").upper(),
        )


@cache
def get_settings() -> CartSettings:
    """Get settings (cached for the process lifetime)."""
    return CartSettings.from_env()

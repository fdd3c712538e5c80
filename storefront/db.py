"""
Redis client for the durable cart slot.

Uses the Upstash REST client so the slot survives restarts of the
process hosting the storefront.
"""

from typing import Optional

from upstash_redis import Redis

from storefront.config import CartSettings
from storefront.errors import StorageUnavailableError, ERROR_STORAGE_NOT_CONFIGURED

_redis_client: Optional[Redis] = None


def get_redis(settings: CartSettings) -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses the standard Upstash env var names, surfaced through settings:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not settings.redis_url or not settings.redis_token:
            raise StorageUnavailableError(ERROR_STORAGE_NOT_CONFIGURED)
        _redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"

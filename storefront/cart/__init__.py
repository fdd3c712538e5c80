"""Cart package: models, pricing, identity, storage and store."""
from .models import Size, Composition, LineItem
from .matcher import compositions_equal, find_line
from .pricing import PriceTier, PricingTable, PriceCalculator, DEFAULT_PRICING_TABLE
from .storage import CartPersistence, InMemoryStore, RedisStore, build_persistence
from .store import CartStore

__all__ = [
    "Size",
    "Composition",
    "LineItem",
    "compositions_equal",
    "find_line",
    "PriceTier",
    "PricingTable",
    "PriceCalculator",
    "DEFAULT_PRICING_TABLE",
    "CartPersistence",
    "InMemoryStore",
    "RedisStore",
    "build_persistence",
    "CartStore",
]

"""
Storefront cart engine.

This package contains:
- catalog: product records borrowed from the commerce API
- cart: line items, identity, pricing, persistence and the cart store
- checkout: order payloads built from the cart
- services.money: Decimal helpers for display and payload boundaries

Note: Imports are lazy so importing ``storefront.config`` or
``storefront.logging`` does not pull in the Redis client.
"""

__all__ = [
    "CartStore",
    "Product",
    "Composition",
    "Size",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartStore":
        from storefront.cart.store import CartStore
        return CartStore
    elif name == "Product":
        from storefront.catalog.models import Product
        return Product
    elif name == "Composition":
        from storefront.cart.models import Composition
        return Composition
    elif name == "Size":
        from storefront.cart.models import Size
        return Size
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

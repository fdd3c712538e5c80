"""Checkout payloads built from the cart."""
from .summary import (
    Coupon,
    describe_line,
    build_order_items,
    build_order_payload,
    coupon_discount,
    build_checkout_params,
)

__all__ = [
    "Coupon",
    "describe_line",
    "build_order_items",
    "build_order_payload",
    "coupon_discount",
    "build_checkout_params",
]

"""Catalog records consumed by the cart (read-only)."""
from .models import Product

__all__ = ["Product"]

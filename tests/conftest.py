"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Keep tests independent of the developer's environment
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")

from storefront.cart import CartPersistence, CartStore, InMemoryStore, PriceCalculator
from storefront.catalog import Product


@pytest.fixture
def classic_pizza():
    """Classic pizza (category 8) without an offer."""
    return Product(id=101, name="Calabresa", category_id=8, price=Decimal("20.00"), sku="PZ-101")


@pytest.fixture
def special_pizza():
    """Special pizza (category 9)."""
    return Product(id=201, name="Frango Catupiry", category_id=9, price=Decimal("30.00"))


@pytest.fixture
def sweet_pizza():
    """Sweet pizza (category 10)."""
    return Product(id=301, name="Chocolate", category_id=10, price=Decimal("25.00"))


@pytest.fixture
def crust():
    """Stuffed crust sold as an add-on (category 12)."""
    return Product(id=1201, name="Catupiry", category_id=12, price=Decimal("8.00"))


@pytest.fixture
def bacon():
    return Product(id=1101, name="Bacon", category_id=11, price=Decimal("5.00"))


@pytest.fixture
def onion():
    return Product(id=1102, name="Cebola", category_id=11, price=Decimal("3.00"))


@pytest.fixture
def soda():
    """Non-customizable product with an offer price."""
    return Product(
        id=1501,
        name="Refrigerante 2L",
        category_id=15,
        price=Decimal("12.00"),
        price_offer=Decimal("9.90"),
    )


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def persistence(memory_store):
    return CartPersistence(memory_store, key="dotflow-cart")


@pytest.fixture
def calculator():
    return PriceCalculator()


@pytest.fixture
def cart(persistence, calculator):
    """Empty cart store backed by an in-memory slot."""
    return CartStore(persistence=persistence, calculator=calculator)

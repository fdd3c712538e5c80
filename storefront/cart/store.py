"""
Cart store: the ordered line-item collection behind the storefront UI.

All operations are synchronous. Every mutation writes the full cart
through the persistence adapter before returning, then notifies
subscribers.
"""
from dataclasses import replace
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from storefront.cart.matcher import find_line
from storefront.cart.models import Composition, LineItem
from storefront.cart.pricing import PriceCalculator
from storefront.cart.storage import CartPersistence, InMemoryStore, build_persistence
from storefront.catalog.models import Product
from storefront.config import CartSettings, get_settings
from storefront.logging import get_logger

logger = get_logger(__name__)

Subscriber = Callable[["CartStore"], None]


class CartStore:
    """
    Owns the cart state.

    Features:
    - Merge of identical selections (same product id and composition)
    - Remove-on-nonpositive quantity
    - Rehydration from the persistence adapter at construction
    - Change notifications to subscribers
    """

    def __init__(
        self,
        persistence: Optional[CartPersistence] = None,
        calculator: Optional[PriceCalculator] = None,
    ):
        self._persistence = persistence or CartPersistence(InMemoryStore())
        self._calculator = calculator or PriceCalculator()
        self._items: List[LineItem] = []
        self._is_open = False
        self._subscribers: List[Subscriber] = []
        self.restore()

    @classmethod
    def from_settings(cls, settings: Optional[CartSettings] = None) -> "CartStore":
        settings = settings or get_settings()
        return cls(
            persistence=build_persistence(settings),
            calculator=PriceCalculator.from_settings(settings),
        )

    # --- State ---

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def calculator(self) -> PriceCalculator:
        return self._calculator

    def restore(self) -> None:
        """Replace in-memory state with what the persistence adapter holds."""
        self._items = list(self._persistence.load())
        logger.debug(f"Cart restored with {len(self._items)} line(s)")

    # --- Mutations ---

    def add(self, product: Product, quantity: int = 1, composition: Optional[Composition] = None) -> None:
        """Merge into the matching line or append a new one."""
        if quantity <= 0:
            logger.debug(f"Ignoring add of product {product.id} with quantity {quantity}")
            return

        index = find_line(self._items, product, composition)
        if index is not None:
            line = self._items[index]
            self._items[index] = replace(line, quantity=line.quantity + quantity)
        else:
            self._items.append(LineItem(product=product, quantity=quantity, composition=composition))

        self._commit()

    def add_item(self, product: Product, quantity: int, composition: Optional[Composition] = None) -> None:
        self.add(product, quantity, composition)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """
        Set the quantity of the first line with this product id.

        Matches by product id only: with two compositions of the same
        product, only the first line is touched. A quantity <= 0 removes
        every line of that product, like ``remove``.
        """
        if quantity <= 0:
            self.remove(product_id)
            return

        for index, line in enumerate(self._items):
            if line.product.id == product_id:
                self._items[index] = replace(line, quantity=quantity)
                self._commit()
                return

    def remove(self, product_id: int) -> None:
        """Remove all lines with this product id."""
        remaining = [line for line in self._items if line.product.id != product_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        self._commit()

    def clear(self) -> None:
        self._items = []
        self._commit()

    # --- Display flag ---

    def open(self) -> None:
        self._is_open = True
        self._notify()

    def close(self) -> None:
        self._is_open = False
        self._notify()

    # --- Queries ---

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._items)

    def total_price(self) -> Decimal:
        return self._calculator.cart_total(self._items)

    def line_total(self, line: LineItem) -> Decimal:
        return self._calculator.line_total(line)

    def line_totals(self) -> List[Tuple[LineItem, Decimal]]:
        return [(line, self._calculator.line_total(line)) for line in self._items]

    def is_empty(self) -> bool:
        return not self._items

    # --- Subscriptions ---

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self) -> None:
        self._persistence.save(tuple(self._items))
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception:
                logger.exception("Cart subscriber failed")

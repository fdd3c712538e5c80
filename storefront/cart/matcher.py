"""
Line-item identity.

Two selections are the same cart line when the product ids match and the
compositions are structurally equal. Equality is literal:

- an absent composition never equals a present one, even an empty one;
- ``flavors`` and ``extras`` are compared element-wise, so reordering
  them yields a different line;
- products inside a composition are compared by their full field values.
"""
from typing import Optional, Sequence

from storefront.catalog.models import Product
from storefront.cart.models import Composition, LineItem


def _products_equal(a: Optional[Product], b: Optional[Product]) -> bool:
    if a is None or b is None:
        return a is b
    return a.model_dump() == b.model_dump()


def _sequences_equal(a: Sequence[Product], b: Sequence[Product]) -> bool:
    if len(a) != len(b):
        return False
    return all(_products_equal(x, y) for x, y in zip(a, b))


def compositions_equal(a: Optional[Composition], b: Optional[Composition]) -> bool:
    """Deep, order-sensitive equality of two optional compositions."""
    if a is None or b is None:
        return a is None and b is None
    return (
        a.size == b.size
        and _sequences_equal(a.flavors, b.flavors)
        and _products_equal(a.crust, b.crust)
        and _sequences_equal(a.extras, b.extras)
    )


def is_same_line(line: LineItem, product: Product, composition: Optional[Composition]) -> bool:
    return line.product.id == product.id and compositions_equal(line.composition, composition)


def find_line(
    items: Sequence[LineItem],
    product: Product,
    composition: Optional[Composition] = None,
) -> Optional[int]:
    """Index of the line matching ``product`` and ``composition``, or None."""
    for index, line in enumerate(items):
        if is_same_line(line, product, composition):
            return index
    return None

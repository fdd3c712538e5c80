"""
Pricing for cart lines.

Unit price of a line:

1. the product's offer price, or its base price when there is no offer;
2. for size-customizable products with a size chosen, the tier price from
   the pricing table *replaces* that price. The tier is "special" when the
   product or any of its flavors is in the special category, else "classic";
3. crust and extras are added on top at their own offer-or-base price.

Line total is unit price times quantity. Nothing is rounded here;
rounding belongs to display formatting.
"""
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from storefront.cart.models import Composition, LineItem, Size
from storefront.catalog.models import Product
from storefront.services.money import to_decimal
from storefront.config import (
    CartSettings,
    DEFAULT_SIZE_CUSTOMIZABLE_CATEGORY_IDS,
    SPECIAL_PIZZA_CATEGORY_ID,
)


class PriceTier(str, Enum):
    """Pricing bucket for size-customizable products."""
    CLASSIC = "classic"
    SPECIAL = "special"


class PricingTable:
    """Static size x tier price matrix."""

    def __init__(self, prices: Mapping[PriceTier, Mapping[Size, Decimal]]):
        self._prices: Dict[PriceTier, Dict[Size, Decimal]] = {
            PriceTier(tier): {Size(size): to_decimal(price) for size, price in by_size.items()}
            for tier, by_size in prices.items()
        }
        for tier in PriceTier:
            missing = set(Size) - set(self._prices.get(tier, {}))
            if missing:
                raise ValueError(f"Pricing table has no {tier.value} price for {sorted(s.value for s in missing)}")

    def price_for(self, tier: PriceTier, size: Size) -> Decimal:
        return self._prices[tier][size]

    def __getitem__(self, tier: PriceTier) -> Dict[Size, Decimal]:
        return dict(self._prices[tier])


DEFAULT_PRICING_TABLE = PricingTable({
    PriceTier.CLASSIC: {
        Size.SMALL: Decimal("32.90"),
        Size.MEDIUM: Decimal("40.90"),
        Size.LARGE: Decimal("46.90"),
    },
    PriceTier.SPECIAL: {
        Size.SMALL: Decimal("38.90"),
        Size.MEDIUM: Decimal("46.90"),
        Size.LARGE: Decimal("54.90"),
    },
})


class PriceCalculator:
    """Derives line and cart totals. Stateless; totals are never cached."""

    def __init__(
        self,
        table: PricingTable = DEFAULT_PRICING_TABLE,
        size_customizable_category_ids: Iterable[int] = DEFAULT_SIZE_CUSTOMIZABLE_CATEGORY_IDS,
        special_category_id: int = SPECIAL_PIZZA_CATEGORY_ID,
    ):
        self.table = table
        self.size_customizable_category_ids: FrozenSet[int] = frozenset(size_customizable_category_ids)
        self.special_category_id = special_category_id

    @classmethod
    def from_settings(cls, settings: CartSettings, table: PricingTable = DEFAULT_PRICING_TABLE) -> "PriceCalculator":
        return cls(
            table=table,
            size_customizable_category_ids=settings.size_customizable_category_ids,
            special_category_id=settings.special_category_id,
        )

    def is_size_customizable(self, product: Product) -> bool:
        return product.category_id in self.size_customizable_category_ids

    def tier_for(self, product: Product, composition: Optional[Composition]) -> PriceTier:
        if product.category_id == self.special_category_id:
            return PriceTier.SPECIAL
        flavors = composition.flavors if composition is not None else ()
        if any(flavor.category_id == self.special_category_id for flavor in flavors):
            return PriceTier.SPECIAL
        return PriceTier.CLASSIC

    def tier_applies(self, product: Product, composition: Optional[Composition]) -> bool:
        return (
            composition is not None
            and composition.size is not None
            and self.is_size_customizable(product)
        )

    def base_price(self, product: Product, composition: Optional[Composition]) -> Decimal:
        """Offer-or-base price, replaced by the tier price when a size applies."""
        if self.tier_applies(product, composition):
            tier = self.tier_for(product, composition)
            return self.table.price_for(tier, composition.size)
        return product.effective_price

    def addons_price(self, composition: Optional[Composition]) -> Decimal:
        if composition is None:
            return Decimal("0")
        total = Decimal("0")
        if composition.crust is not None:
            total += composition.crust.effective_price
        for extra in composition.extras:
            total += extra.effective_price
        return total

    def unit_price(self, line: LineItem) -> Decimal:
        return self.base_price(line.product, line.composition) + self.addons_price(line.composition)

    def line_total(self, line: LineItem) -> Decimal:
        return self.unit_price(line) * line.quantity

    def cart_total(self, items: Iterable[LineItem]) -> Decimal:
        return sum((self.line_total(line) for line in items), Decimal("0"))


default_calculator = PriceCalculator()


def line_total(line: LineItem) -> Decimal:
    """Line total with the default pricing table and category ids."""
    return default_calculator.line_total(line)


def cart_total(items: Iterable[LineItem]) -> Decimal:
    """Cart total with the default pricing table and category ids."""
    return default_calculator.cart_total(items)

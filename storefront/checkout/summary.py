"""
Order and checkout payload builders.

Turns cart lines into the order-item payload expected by the commerce
API and into the flat ``meta_*`` parameters of the external checkout
page. All amounts come from the price calculator, so the checkout total
always equals the cart total shown to the shopper.
"""
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Sequence

from storefront.cart.models import LineItem
from storefront.cart.pricing import PriceCalculator, default_calculator
from storefront.config import get_settings
from storefront.services.money import round_money, to_cents, to_decimal, to_float

HALF_AND_HALF = "metade_metade"


@dataclass(frozen=True)
class Coupon:
    """Discount coupon applied at checkout."""
    code: str
    discount: Decimal
    kind: Literal["percentage", "fixed"] = "percentage"

    def __post_init__(self):
        object.__setattr__(self, "discount", to_decimal(self.discount))
        if self.kind not in ("percentage", "fixed"):
            raise ValueError(f"Unknown coupon kind: {self.kind!r}")


def coupon_discount(total: Decimal, coupon: Optional[Coupon]) -> Decimal:
    """Discount amount for ``total``; a fixed coupon never exceeds the total."""
    if coupon is None:
        return Decimal("0")
    if coupon.kind == "percentage":
        return total * coupon.discount / Decimal("100")
    return min(coupon.discount, total)


def describe_line(line: LineItem) -> str:
    """Human-readable notes for an order item, e.g. "Calabresa, Tamanho: G"."""
    parts = [line.product.name]
    composition = line.composition
    if composition is not None:
        if composition.size is not None:
            parts.append(f"Tamanho: {composition.size.value}")
        if composition.flavors:
            parts.append(f"Sabores: {', '.join(flavor.name for flavor in composition.flavors)}")
        if composition.crust is not None:
            parts.append(f"Borda: {composition.crust.name}")
        if composition.extras:
            parts.append(f"Adicionais: {', '.join(extra.name for extra in composition.extras)}")
    return ", ".join(parts)


def _offer_discount(line: LineItem, calculator: PriceCalculator) -> Decimal:
    # A tier price replaces the offer, so there is nothing to report then
    product = line.product
    if calculator.tier_applies(product, line.composition) or not product.has_offer:
        return Decimal("0")
    if product.price_offer >= product.price:
        return Decimal("0")
    return (product.price - product.price_offer) * line.quantity


def build_order_items(
    items: Sequence[LineItem],
    calculator: PriceCalculator = default_calculator,
) -> List[Dict[str, Any]]:
    """Order-item payloads for the commerce API."""
    order_items = []
    for line in items:
        composition = line.composition
        order_items.append({
            "product_id": line.product.id,
            "quantity": line.quantity,
            "unit_price": to_float(round_money(calculator.unit_price(line))),
            "total_price": to_float(round_money(calculator.line_total(line))),
            "discount_amount": to_float(round_money(_offer_discount(line, calculator))),
            "notes": describe_line(line),
            "metadata": json.dumps({
                "product_name": line.product.name,
                "product_sku": line.product.sku,
                "options": composition.to_dict() if composition is not None else None,
            }, ensure_ascii=False),
        })
    return order_items


def build_order_payload(
    items: Sequence[LineItem],
    calculator: PriceCalculator = default_calculator,
    customer_id: Optional[int] = None,
    shipping_amount: Decimal = Decimal("0"),
    tax_amount: Decimal = Decimal("0"),
) -> Dict[str, Any]:
    """
    Pending order for the commerce API.

    ``discount_amount`` reports offer savings; it is already reflected in
    the subtotal and is not subtracted again.
    """
    subtotal = calculator.cart_total(items)
    discount = sum((_offer_discount(line, calculator) for line in items), Decimal("0"))
    total = subtotal + to_decimal(shipping_amount) + to_decimal(tax_amount)

    return {
        "customer_id": customer_id,
        "status": "pending",
        "payment_status": "pending",
        "source": "ecommerce",
        "subtotal": to_float(round_money(subtotal)),
        "shipping_amount": to_float(round_money(shipping_amount)),
        "tax_amount": to_float(round_money(tax_amount)),
        "discount_amount": to_float(round_money(discount)),
        "total_amount": to_float(round_money(total)),
        "order_items": build_order_items(items, calculator),
    }


def build_checkout_params(
    items: Sequence[LineItem],
    order_id,
    calculator: PriceCalculator = default_calculator,
    customer_id: Optional[int] = None,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    coupon: Optional[Coupon] = None,
    currency: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Flat parameters for the external checkout page.

    Crust and extras are listed as separate numbered items after the line
    they belong to. ``amount`` is in cents and already includes the coupon.
    """
    total = calculator.cart_total(items)
    discount = coupon_discount(total, coupon)
    count = len(items)

    params: Dict[str, Any] = {
        "amount": to_cents(total - discount),
        "currency": (currency or get_settings().currency).lower(),
        "description": f"Carrinho com {count} {'item' if count == 1 else 'itens'}",
        "customer_id": str(customer_id) if customer_id is not None else None,
        "meta_customer_name": customer_name or "Cliente",
        "meta_customer_phone": customer_phone or "",
        "meta_order_id": str(order_id),
        "meta_items_count": count,
        "meta_cart_total": f"{round_money(total):.2f}",
        "meta_source": "ecommerce",
    }

    if coupon is not None:
        params["meta_coupon_code"] = coupon.code
        params["meta_coupon_discount"] = str(coupon.discount)
        params["meta_coupon_type"] = coupon.kind
        params["meta_discount_amount"] = f"{round_money(discount):.2f}"

    number = 1
    for line in items:
        composition = line.composition
        params[f"meta_item_{number}"] = f"{line.product.name} (Qtd: {line.quantity})"
        params[f"meta_product_id_{number}"] = line.product.id
        params[f"meta_product_price_{number}"] = f"{round_money(calculator.base_price(line.product, composition)):.2f}"
        params[f"meta_product_qty_{number}"] = line.quantity

        if composition is not None:
            if composition.size is not None:
                params[f"meta_pizza_size_{number}"] = composition.size.value
            if composition.flavors:
                params[f"meta_pizza_flavors_{number}"] = ", ".join(f.name for f in composition.flavors)
                if len(composition.flavors) == 2:
                    params[f"meta_pizza_type_{number}"] = HALF_AND_HALF
        number += 1

        if composition is None:
            continue
        addons = [(f"Borda {composition.crust.name}", composition.crust)] if composition.crust is not None else []
        addons += [(extra.name, extra) for extra in composition.extras]
        for label, addon in addons:
            params[f"meta_item_{number}"] = f"{label} (Qtd: {line.quantity})"
            params[f"meta_product_id_{number}"] = addon.id
            params[f"meta_product_price_{number}"] = f"{round_money(addon.effective_price):.2f}"
            params[f"meta_product_qty_{number}"] = line.quantity
            number += 1

    return params

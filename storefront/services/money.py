"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Rounding is a
display/payload concern only: the price calculator never rounds.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from storefront.config import get_settings

MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal]

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
}


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Go through str so 40.9 becomes Decimal("40.9"), not its binary expansion
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def to_cents(value: Number) -> int:
    """
    Convert decimal amount to minor units (centavos/cents).

    Used for checkout APIs that expect integer minor units.
    """
    return int((to_decimal(value) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert minor units to a decimal amount."""
    return Decimal(cents) / Decimal(100)


def format_money(value: Number, currency: Optional[str] = None) -> str:
    """
    Format monetary value with currency symbol.

    Defaults to the configured CURRENCY.

    BRL uses the Brazilian convention: "R$ 1.234,56".
    """
    currency = (currency or get_settings().currency).upper()
    rounded = round_money(value)
    symbol = CURRENCY_SYMBOLS.get(currency, currency)

    formatted = f"{rounded:,.2f}"
    if currency == "BRL":
        formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"{symbol} {formatted}"
    return f"{symbol}{formatted}"


def to_float(value: Number) -> float:
    """
    Convert to float for JSON payloads sent to external APIs.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))

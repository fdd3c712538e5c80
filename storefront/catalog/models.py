"""
Catalog product model.

Products are loaded from the commerce API and borrowed read-only by the
cart; they are never mutated after loading.
"""
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.services.money import to_decimal


class Product(BaseModel):
    """A catalog entry as returned by the commerce API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str = ""
    category_id: Optional[int] = None
    price: Decimal = Field(ge=0)
    price_offer: Optional[Decimal] = Field(default=None, ge=0)
    sku: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("price", "price_offer", mode="before")
    @classmethod
    def _coerce_money(cls, value):
        # Floats from JSON go through str to keep 32.9 exact
        if value is None or isinstance(value, Decimal):
            return value
        if isinstance(value, float):
            return to_decimal(value)
        return value

    @property
    def effective_price(self) -> Decimal:
        """Offer price when one applies, else base price. A zero offer means no offer."""
        if self.price_offer:
            return self.price_offer
        return self.price

    @property
    def has_offer(self) -> bool:
        return bool(self.price_offer)

    def to_dict(self) -> dict:
        """JSON-safe dict; only fields that were set are kept."""
        return self.model_dump(mode="json", exclude_unset=True)

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls.model_validate(data)

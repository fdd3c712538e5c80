"""Cart line models: size, composition and line item."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from storefront.catalog.models import Product
from storefront.errors import (
    CartRecordError,
    ERROR_RECORD_NOT_A_DICT,
    ERROR_RECORD_BAD_QUANTITY,
)


class Size(str, Enum):
    """Pizza sizes (Pequena, Média, Grande)."""
    SMALL = "P"
    MEDIUM = "M"
    LARGE = "G"


@dataclass(frozen=True)
class Composition:
    """
    Customization choices attached to a cart line.

    ``flavors`` and ``extras`` are ordered: the same choices in a different
    order make a different composition.
    """
    size: Optional[Size] = None
    flavors: Tuple[Product, ...] = ()
    crust: Optional[Product] = None
    extras: Tuple[Product, ...] = ()

    def __post_init__(self):
        if self.size is not None and not isinstance(self.size, Size):
            object.__setattr__(self, "size", Size(self.size))
        object.__setattr__(self, "flavors", tuple(self.flavors))
        object.__setattr__(self, "extras", tuple(self.extras))

    def to_dict(self) -> dict:
        return {
            "size": self.size.value if self.size is not None else None,
            "flavors": [flavor.to_dict() for flavor in self.flavors],
            "crust": self.crust.to_dict() if self.crust is not None else None,
            "extras": [extra.to_dict() for extra in self.extras],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Composition":
        if not isinstance(data, dict):
            raise CartRecordError(ERROR_RECORD_NOT_A_DICT)
        crust = data.get("crust")
        return cls(
            size=data.get("size"),
            flavors=tuple(Product.from_dict(item) for item in data.get("flavors") or ()),
            crust=Product.from_dict(crust) if crust is not None else None,
            extras=tuple(Product.from_dict(item) for item in data.get("extras") or ()),
        )


@dataclass(frozen=True)
class LineItem:
    """One row in the cart. Quantity is always at least 1."""
    product: Product
    quantity: int = 1
    composition: Optional[Composition] = field(default=None)

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")

    def to_dict(self) -> dict:
        data = {
            "product": self.product.to_dict(),
            "quantity": self.quantity,
        }
        # Absent composition is stored as absent, not as an empty object
        if self.composition is not None:
            data["composition"] = self.composition.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        if not isinstance(data, dict):
            raise CartRecordError(ERROR_RECORD_NOT_A_DICT)
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise CartRecordError(f"{ERROR_RECORD_BAD_QUANTITY}: {quantity!r}")
        composition = data.get("composition")
        return cls(
            product=Product.from_dict(data["product"]),
            quantity=quantity,
            composition=Composition.from_dict(composition) if composition is not None else None,
        )

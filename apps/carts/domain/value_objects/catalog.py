"""
Read-only catalog snapshots consumed by the cart.

Products, variants and designs are owned elsewhere; the cart only reads the
fields it needs for pricing and validation.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from shared.domain import ValueObject


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class ProductSnapshot(ValueObject):
    """Product fields relevant to cart pricing."""
    id: UUID
    name: str
    base_price: Decimal
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'base_price', _as_decimal(self.base_price))


@dataclass(frozen=True)
class VariantSnapshot(ValueObject):
    """Size/color SKU of a product with its price delta."""
    id: UUID
    product_id: UUID
    additional_price: Decimal = Decimal('0')
    size: Optional[str] = None
    color: Optional[str] = None
    sku: Optional[str] = None
    stock_quantity: int = 0
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'additional_price', _as_decimal(self.additional_price))

    def belongs_to(self, product_id: UUID) -> bool:
        """Check if the variant is a SKU of the given product."""
        return self.product_id == product_id


@dataclass(frozen=True)
class DesignSnapshot(ValueObject):
    """Design that a customization can reference."""
    id: UUID
    name: str
    is_active: bool = True

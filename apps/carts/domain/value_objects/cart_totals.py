"""
Cart totals value object.
"""
from dataclasses import dataclass
from decimal import Decimal

from shared.domain import ValueObject


@dataclass(frozen=True)
class CartTotals(ValueObject):
    """Derived monetary totals of a cart."""
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    grand_total: Decimal

"""
Cart item entity.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from shared.domain import BaseEntity
from ..exceptions import InvalidQuantityError
from ..services.pricing import ZERO, compute_line_total, quantize_money


@dataclass(eq=False)
class CartItem(BaseEntity):
    """
    One line of a cart.

    Unit price and surcharge are captured when the line is created; the line
    total is always derived from them and the quantity.
    """
    product_id: UUID
    product_name: str
    unit_price: Decimal
    quantity: int = 1
    variant_id: Optional[UUID] = None
    customization_id: Optional[UUID] = None
    customization_surcharge: Decimal = ZERO
    cart_id: Optional[UUID] = None
    line_total: Decimal = field(default=ZERO, init=False)

    def __post_init__(self):
        self._validate_quantity(self.quantity)
        self.unit_price = quantize_money(self.unit_price)
        self.customization_surcharge = quantize_money(self.customization_surcharge)
        self.calculate_line_total()

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise InvalidQuantityError(quantity)

    @property
    def is_customized(self) -> bool:
        """Check if the line carries a customization."""
        return self.customization_id is not None

    @property
    def dedup_key(self) -> Optional[Tuple[UUID, Optional[UUID]]]:
        """Merge key, or None for customized lines which never merge."""
        if self.is_customized:
            return None
        return (self.product_id, self.variant_id)

    def is_same_line(self, other: 'CartItem') -> bool:
        """Check if other should merge into this line."""
        key = self.dedup_key
        return key is not None and key == other.dedup_key

    def calculate_line_total(self) -> Decimal:
        """Recompute the line total from price, surcharge and quantity."""
        self.line_total = compute_line_total(
            self.unit_price, self.customization_surcharge, self.quantity
        )
        return self.line_total

    def increase_quantity(self, amount: int) -> None:
        """Add to the quantity of this line."""
        self._validate_quantity(amount)
        self.quantity += amount
        self.calculate_line_total()
        self.touch()

    def change_quantity(self, quantity: int) -> None:
        """Set the quantity of this line."""
        self._validate_quantity(quantity)
        self.quantity = quantity
        self.calculate_line_total()
        self.touch()

"""
Shipping rule value object.
"""
from dataclasses import dataclass
from decimal import Decimal

from shared.domain import ValueObject


@dataclass(frozen=True)
class ShippingRule(ValueObject):
    """Flat shipping fee, waived once the subtotal reaches the threshold."""
    threshold: Decimal
    flat_fee: Decimal

    def __post_init__(self):
        for name in ('threshold', 'flat_fee'):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        if self.threshold < 0 or self.flat_fee < 0:
            raise ValueError("Shipping threshold and fee must be non-negative")

    @classmethod
    def free(cls) -> 'ShippingRule':
        """A rule that never charges shipping."""
        return cls(threshold=Decimal('0'), flat_fee=Decimal('0'))

    def cost_for(self, subtotal: Decimal) -> Decimal:
        """Get the shipping cost for a subtotal."""
        if subtotal >= self.threshold:
            return Decimal('0')
        return self.flat_fee

    def qualifies_for_free_shipping(self, subtotal: Decimal) -> bool:
        """Check if the subtotal ships for free."""
        return subtotal >= self.threshold

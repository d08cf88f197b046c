"""
Pricing configuration source.
"""
from abc import ABC, abstractmethod
from decimal import Decimal

from ..value_objects.shipping_rule import ShippingRule


class PricingConfiguration(ABC):
    """Current tax, shipping and surcharge settings, read on every computation."""

    @abstractmethod
    def get_tax_rate(self) -> Decimal:
        """Get the tax rate as a fraction (0.18 for 18%)."""
        pass

    @abstractmethod
    def get_shipping_rule(self) -> ShippingRule:
        """Get the free-shipping threshold and flat fee."""
        pass

    @abstractmethod
    def get_customization_surcharge(self) -> Decimal:
        """Get the flat add-on price of a customized line."""
        pass

    def get_shipping_cost(self, subtotal: Decimal) -> Decimal:
        """Get the shipping cost for a subtotal."""
        return self.get_shipping_rule().cost_for(subtotal)

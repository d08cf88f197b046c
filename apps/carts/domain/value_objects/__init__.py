# Value objects
from .cart_totals import CartTotals
from .catalog import ProductSnapshot, VariantSnapshot, DesignSnapshot
from .shipping_rule import ShippingRule
from .thread_color import ThreadColor

__all__ = [
    'CartTotals',
    'ProductSnapshot',
    'VariantSnapshot',
    'DesignSnapshot',
    'ShippingRule',
    'ThreadColor',
]

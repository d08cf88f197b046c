"""
Pricing configuration backed by Django settings.
"""
import logging
from decimal import Decimal

from django.conf import settings

from ...domain.ports.pricing_configuration import PricingConfiguration
from ...domain.services.pricing import percent_to_rate, to_decimal
from ...domain.value_objects.shipping_rule import ShippingRule

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE_PERCENT = Decimal('18')
DEFAULT_SHIPPING_COST = Decimal('100.00')
DEFAULT_SHIPPING_THRESHOLD = Decimal('1000.00')
DEFAULT_CUSTOMIZATION_SURCHARGE = Decimal('10.00')


class SettingsPricingConfiguration(PricingConfiguration):
    """
    Reads CART_* pricing settings on every call.

    Nothing is cached, so overriding settings at runtime (or in tests) takes
    effect on the next computation.
    """

    def get_tax_rate(self) -> Decimal:
        percent = getattr(settings, 'CART_TAX_RATE_PERCENT', DEFAULT_TAX_RATE_PERCENT)
        return percent_to_rate(percent)

    def get_shipping_rule(self) -> ShippingRule:
        return ShippingRule(
            threshold=to_decimal(getattr(settings, 'CART_SHIPPING_THRESHOLD', DEFAULT_SHIPPING_THRESHOLD)),
            flat_fee=to_decimal(getattr(settings, 'CART_SHIPPING_COST', DEFAULT_SHIPPING_COST)),
        )

    def get_customization_surcharge(self) -> Decimal:
        return to_decimal(
            getattr(settings, 'CART_CUSTOMIZATION_SURCHARGE', DEFAULT_CUSTOMIZATION_SURCHARGE)
        )

"""
Cart pricing policy.

Pure functions over already-validated inputs. All money is exact Decimal,
rounded half-up to two places; tax and shipping inputs are passed in by the
caller on every computation, never cached here.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..value_objects.cart_totals import CartTotals
from ..value_objects.shipping_rule import ShippingRule

MONEY_PLACES = Decimal('0.01')
RATE_PLACES = Decimal('0.0001')
ZERO = Decimal('0.00')


def to_decimal(value) -> Decimal:
    """Convert a price-like value to Decimal without going through binary floats."""
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(amount) -> Decimal:
    """Round an amount to cents."""
    return to_decimal(amount).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def percent_to_rate(percent) -> Decimal:
    """Convert a percentage (e.g. 18) to a rate (0.1800)."""
    return (to_decimal(percent) / Decimal('100')).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def compute_unit_price(base_price, variant_delta=None) -> Decimal:
    """Unit price of a line: product base price plus the variant's price delta."""
    return quantize_money(to_decimal(base_price) + to_decimal(variant_delta))


def compute_customization_surcharge(customization, flat_surcharge) -> Decimal:
    """Flat surcharge for a customized line, zero otherwise."""
    if customization is None:
        return ZERO
    return quantize_money(flat_surcharge)


def compute_line_total(unit_price, surcharge, quantity: int) -> Decimal:
    """(unit price + surcharge) x quantity."""
    return quantize_money((to_decimal(unit_price) + to_decimal(surcharge)) * quantity)


def compute_tax(subtotal, tax_rate) -> Decimal:
    return quantize_money(to_decimal(subtotal) * to_decimal(tax_rate))


def compute_cart_totals(
    items: Iterable,
    tax_rate,
    shipping_rule: ShippingRule,
    discount: Optional[Decimal] = None,
) -> CartTotals:
    """
    Derive cart totals from its lines.

    Args:
        items: Objects exposing ``line_total``
        tax_rate: Fraction applied to the subtotal (0.10 for 10%)
        shipping_rule: Threshold rule giving the shipping cost
        discount: Amount taken off the grand total

    Returns:
        CartTotals with grand_total = subtotal + tax + shipping - discount
    """
    line_totals = [to_decimal(item.line_total) for item in items]
    subtotal = quantize_money(sum(line_totals, Decimal('0')))
    discount = quantize_money(discount)
    tax = compute_tax(subtotal, tax_rate)
    # An empty cart has nothing to ship.
    shipping = quantize_money(shipping_rule.cost_for(subtotal)) if line_totals else ZERO
    grand_total = quantize_money(subtotal + tax + shipping - discount)
    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        grand_total=grand_total,
    )

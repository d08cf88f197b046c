"""
Cart entity (Aggregate Root).
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from shared.domain import AggregateRoot, utc_now
from ..events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
)
from ..exceptions import CartItemNotFoundError
from ..services import pricing
from ..value_objects.cart_totals import CartTotals
from ..value_objects.shipping_rule import ShippingRule
from .cart_item import CartItem

DEFAULT_EXPIRY_DAYS = 30


@dataclass(eq=False)
class Cart(AggregateRoot):
    """
    Shopping cart of one authenticated user.

    Totals are derived state: every mutating method ends by recomputing them
    from the lines and the pricing snapshot (tax rate and shipping rule).
    """
    user_id: UUID
    items: List[CartItem] = field(default_factory=list)
    subtotal: Decimal = pricing.ZERO
    tax_amount: Decimal = pricing.ZERO
    shipping_cost: Decimal = pricing.ZERO
    discount_amount: Decimal = pricing.ZERO
    total: Decimal = pricing.ZERO
    tax_rate: Decimal = Decimal('0')
    shipping_rule: ShippingRule = field(default_factory=ShippingRule.free)
    expires_at: Optional[datetime] = None
    version: int = 0

    @classmethod
    def create(cls, user_id: UUID, expiry_days: int = DEFAULT_EXPIRY_DAYS) -> 'Cart':
        """Create a new empty cart for a user."""
        cart = cls(user_id=user_id)
        cart.extend_expiry(expiry_days)
        return cart

    # Pricing snapshot

    def apply_pricing(self, tax_rate: Decimal, shipping_rule: ShippingRule) -> None:
        """Set the pricing used by the next recomputation."""
        self.tax_rate = pricing.to_decimal(tax_rate)
        self.shipping_rule = shipping_rule

    def reprice(self, tax_rate: Decimal, shipping_rule: ShippingRule) -> None:
        """Apply current pricing and recompute totals immediately."""
        self.apply_pricing(tax_rate, shipping_rule)
        self.recalculate_totals()

    def recalculate_totals(self) -> CartTotals:
        """Derive subtotal, tax, shipping and total from the lines."""
        totals = pricing.compute_cart_totals(
            self.items,
            tax_rate=self.tax_rate,
            shipping_rule=self.shipping_rule,
            discount=self.discount_amount,
        )
        self.subtotal = totals.subtotal
        self.tax_amount = totals.tax
        self.shipping_cost = totals.shipping
        self.discount_amount = totals.discount
        self.total = totals.grand_total
        return totals

    # Item management

    def add_item(self, item: CartItem) -> CartItem:
        """Add a line, merging into an identical non-customized line if present."""
        line = self._merge_or_append(item)
        self.recalculate_totals()
        self.touch()
        return line

    def add_items(self, items: Iterable[CartItem]) -> List[CartItem]:
        """Add several lines with the same merge rule and a single recomputation."""
        lines = [self._merge_or_append(item) for item in items]
        self.recalculate_totals()
        self.touch()
        return lines

    def update_quantity(self, item_id: UUID, quantity: int) -> CartItem:
        """Set the quantity of a line."""
        item = self.get_item(item_id)
        previous = item.quantity
        item.change_quantity(quantity)
        self.recalculate_totals()
        self.touch()
        self.add_domain_event(
            CartItemQuantityUpdated(
                cart_id=self.id,
                item_id=item.id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        return item

    def remove_item(self, item_id: UUID) -> CartItem:
        """Remove a line from the cart."""
        item = self.get_item(item_id)
        self.items = [line for line in self.items if line.id != item_id]
        self.recalculate_totals()
        self.touch()
        self.add_domain_event(
            CartItemRemoved(
                cart_id=self.id,
                item_id=item.id,
                customization_id=item.customization_id,
            )
        )
        return item

    def clear(self) -> List[CartItem]:
        """Remove all lines from the cart."""
        removed = self.items
        self.items = []
        self.recalculate_totals()
        self.touch()
        for item in removed:
            self.add_domain_event(
                CartItemRemoved(
                    cart_id=self.id,
                    item_id=item.id,
                    customization_id=item.customization_id,
                )
            )
        self.add_domain_event(CartCleared(cart_id=self.id, items_removed=len(removed)))
        return removed

    def find_item(self, item_id: UUID) -> Optional[CartItem]:
        """Find a line by its ID."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_item(self, item_id: UUID) -> CartItem:
        """Get a line by its ID or raise CartItemNotFoundError."""
        item = self.find_item(item_id)
        if item is None:
            raise CartItemNotFoundError(item_id)
        return item

    def _find_mergeable(self, item: CartItem) -> Optional[CartItem]:
        for existing in self.items:
            if existing.is_same_line(item):
                return existing
        return None

    def _merge_or_append(self, item: CartItem) -> CartItem:
        existing = self._find_mergeable(item)
        if existing is not None:
            existing.increase_quantity(item.quantity)
            line, merged = existing, True
        else:
            item.cart_id = self.id
            self.items.append(item)
            line, merged = item, False

        self.add_domain_event(
            CartItemAdded(
                cart_id=self.id,
                item_id=line.id,
                product_id=line.product_id,
                variant_id=line.variant_id,
                quantity=item.quantity,
                merged=merged,
            )
        )
        return line

    # Lifecycle

    def extend_expiry(self, days: int = DEFAULT_EXPIRY_DAYS) -> None:
        """Push the expiry out to `days` from now."""
        self.expires_at = utc_now() + timedelta(days=days)

    @property
    def is_expired(self) -> bool:
        """Check if the cart is past its expiry."""
        return self.expires_at is not None and self.expires_at <= utc_now()

    @property
    def totals(self) -> CartTotals:
        """Get the current totals as a value object."""
        return CartTotals(
            subtotal=self.subtotal,
            tax=self.tax_amount,
            shipping=self.shipping_cost,
            discount=self.discount_amount,
            grand_total=self.total,
        )

    @property
    def item_count(self) -> int:
        """Get the total number of units."""
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        """Check if the cart is empty."""
        return len(self.items) == 0

    @property
    def customization_ids(self) -> List[UUID]:
        """IDs of customizations referenced by lines."""
        return [item.customization_id for item in self.items if item.is_customized]

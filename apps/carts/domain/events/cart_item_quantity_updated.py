"""
Cart item quantity updated domain event.
"""
from dataclasses import dataclass
from uuid import UUID

from shared.domain import DomainEvent


@dataclass(frozen=True)
class CartItemQuantityUpdated(DomainEvent):
    """Event raised when a line's quantity is set explicitly."""
    cart_id: UUID
    item_id: UUID
    previous_quantity: int
    new_quantity: int

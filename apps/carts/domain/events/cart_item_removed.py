"""
Cart item removed domain event.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain import DomainEvent


@dataclass(frozen=True)
class CartItemRemoved(DomainEvent):
    """
    Event raised when a line leaves the cart.

    Carries the line's customization id so its record and stored preview
    can be cleaned up once the cart is persisted.
    """
    cart_id: UUID
    item_id: UUID
    customization_id: Optional[UUID] = None

"""
Cart item added domain event.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain import DomainEvent


@dataclass(frozen=True)
class CartItemAdded(DomainEvent):
    """Event raised when an add merges into a line or creates a new one."""
    cart_id: UUID
    item_id: UUID
    product_id: UUID
    variant_id: Optional[UUID]
    quantity: int
    merged: bool = False

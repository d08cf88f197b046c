"""
Cart cleared domain event.
"""
from dataclasses import dataclass
from uuid import UUID

from shared.domain import DomainEvent


@dataclass(frozen=True)
class CartCleared(DomainEvent):
    """Event raised when all lines are purged from a cart."""
    cart_id: UUID
    items_removed: int

"""
Local cart synced domain event.
"""
from dataclasses import dataclass
from uuid import UUID

from shared.domain import DomainEvent


@dataclass(frozen=True)
class LocalCartSynced(DomainEvent):
    """Event raised when a client-side cart is merged into the server cart."""
    cart_id: UUID
    items_received: int
    lines_added: int

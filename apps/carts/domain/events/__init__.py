# Domain events
from .cart_item_added import CartItemAdded
from .cart_item_quantity_updated import CartItemQuantityUpdated
from .cart_item_removed import CartItemRemoved
from .cart_cleared import CartCleared
from .local_cart_synced import LocalCartSynced

__all__ = [
    'CartItemAdded',
    'CartItemQuantityUpdated',
    'CartItemRemoved',
    'CartCleared',
    'LocalCartSynced',
]

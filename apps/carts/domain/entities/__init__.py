# Domain entities
from .cart import Cart
from .cart_item import CartItem
from .customization import Customization

__all__ = ['Cart', 'CartItem', 'Customization']

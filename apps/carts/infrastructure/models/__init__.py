# Django models
from .cart_model import CartModel, CartItemModel
from .customization_model import CustomizationModel

__all__ = ['CartModel', 'CartItemModel', 'CustomizationModel']

# Repository interfaces
from .cart_repository import CartRepository
from .customization_repository import CustomizationRepository

__all__ = ['CartRepository', 'CustomizationRepository']

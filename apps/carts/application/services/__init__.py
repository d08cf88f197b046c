# Application services
from .cart_service import CartService, MutationStage
from .customization_service import CustomizationService

__all__ = ['CartService', 'MutationStage', 'CustomizationService']

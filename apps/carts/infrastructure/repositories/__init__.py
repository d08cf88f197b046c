# Repository implementations
from .django_cart_repository import DjangoCartRepository
from .django_customization_repository import DjangoCustomizationRepository

__all__ = ['DjangoCartRepository', 'DjangoCustomizationRepository']

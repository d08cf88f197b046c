# Django model discovery
from .infrastructure.models import CartItemModel, CartModel, CustomizationModel  # noqa: F401

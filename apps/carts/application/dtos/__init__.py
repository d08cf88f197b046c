# Cart DTOs
from .cart_dto import (
    AddToCartDTO,
    CartDTO,
    CartItemDTO,
    CartItemPatch,
    CartSummaryDTO,
    CustomizationDataDTO,
    CustomizationSummaryDTO,
)

__all__ = [
    'AddToCartDTO',
    'CartDTO',
    'CartItemDTO',
    'CartItemPatch',
    'CartSummaryDTO',
    'CustomizationDataDTO',
    'CustomizationSummaryDTO',
]

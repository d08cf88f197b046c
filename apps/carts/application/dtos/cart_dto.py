"""
Cart DTOs.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from shared.application import UNSET, Patchable, is_set
from ...domain.entities.cart import Cart
from ...domain.entities.cart_item import CartItem
from ...domain.entities.customization import Customization


@dataclass
class CustomizationDataDTO:
    """Inline customization submitted with an add-to-cart request."""
    design_id: UUID
    thread_color_hex: str
    additional_notes: Optional[str] = None
    preview_image: Optional[bytes] = None


@dataclass
class AddToCartDTO:
    """
    DTO for adding an item, also used for each line of a local cart sync.

    A line is customized either inline (``customization``) or by referencing a
    saved customization (``customization_id``), never both.
    """
    product_id: UUID
    quantity: int = 1
    variant_id: Optional[UUID] = None
    customization: Optional[CustomizationDataDTO] = None
    customization_id: Optional[UUID] = None


@dataclass
class CartItemPatch:
    """
    Partial update of a cart line.

    Fields left as UNSET are not touched. ``additional_notes=None`` clears the
    notes of the line's customization.
    """
    quantity: Patchable[int] = UNSET
    additional_notes: Patchable[Optional[str]] = UNSET

    @property
    def is_empty(self) -> bool:
        return not (is_set(self.quantity) or is_set(self.additional_notes))


@dataclass
class CustomizationSummaryDTO:
    """DTO for a customization attached to a cart line."""
    id: UUID
    design_id: UUID
    variant_id: Optional[UUID]
    thread_color_hex: str
    additional_notes: str
    preview_image_url: Optional[str]

    @classmethod
    def from_entity(cls, customization: Customization) -> 'CustomizationSummaryDTO':
        """Create DTO from entity."""
        return cls(
            id=customization.id,
            design_id=customization.design_id,
            variant_id=customization.variant_id,
            thread_color_hex=customization.thread_color.value,
            additional_notes=customization.additional_notes,
            preview_image_url=customization.preview_image_url,
        )


@dataclass
class CartItemDTO:
    """DTO for cart line output."""
    id: UUID
    product_id: UUID
    product_name: str
    variant_id: Optional[UUID]
    quantity: int
    unit_price: Decimal
    customization_surcharge: Decimal
    line_total: Decimal
    added_at: datetime
    customization: Optional[CustomizationSummaryDTO] = None

    @classmethod
    def from_entity(
        cls,
        item: CartItem,
        customization: Optional[Customization] = None,
    ) -> 'CartItemDTO':
        """Create DTO from entity."""
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            variant_id=item.variant_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            customization_surcharge=item.customization_surcharge,
            line_total=item.line_total,
            added_at=item.created_at,
            customization=(
                CustomizationSummaryDTO.from_entity(customization) if customization else None
            ),
        )


@dataclass
class CartDTO:
    """DTO for cart output."""
    id: UUID
    user_id: UUID
    items: List[CartItemDTO]
    total_items: int
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    tax_rate: Decimal
    shipping_cost: Decimal
    total: Decimal
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls,
        cart: Cart,
        customizations: Optional[Dict[UUID, Customization]] = None,
    ) -> 'CartDTO':
        """Create DTO from entity."""
        customizations = customizations or {}
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            items=[
                CartItemDTO.from_entity(item, customizations.get(item.customization_id))
                for item in cart.items
            ],
            total_items=cart.item_count,
            subtotal=cart.subtotal,
            discount_amount=cart.discount_amount,
            tax_amount=cart.tax_amount,
            tax_rate=cart.tax_rate,
            shipping_cost=cart.shipping_cost,
            total=cart.total,
            expires_at=cart.expires_at,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )


@dataclass
class CartSummaryDTO:
    """DTO for the cart totals shown in headers and checkout."""
    total_items: int
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    total: Decimal
    free_shipping: bool = field(default=False)

    @classmethod
    def from_entity(cls, cart: Cart) -> 'CartSummaryDTO':
        """Create DTO from entity."""
        return cls(
            total_items=cart.item_count,
            subtotal=cart.subtotal,
            discount_amount=cart.discount_amount,
            tax_amount=cart.tax_amount,
            shipping_cost=cart.shipping_cost,
            total=cart.total,
            free_shipping=not cart.is_empty and cart.shipping_rule.qualifies_for_free_shipping(cart.subtotal),
        )

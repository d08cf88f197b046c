"""
Django ORM implementation of CartRepository.
"""
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import F

from shared.domain.exceptions import ConflictError
from ...domain.entities.cart import Cart
from ...domain.entities.cart_item import CartItem
from ...domain.repositories.cart_repository import CartRepository
from ...domain.value_objects.shipping_rule import ShippingRule
from ..models.cart_model import CartItemModel, CartModel


class DjangoCartRepository(CartRepository):
    """
    Django ORM based cart repository implementation.

    Saves are version-checked: a cart loaded at version N only persists if the
    stored row is still at version N, which catches writes that bypassed the
    cart lock.
    """

    def save(self, cart: Cart) -> Cart:
        """Save a cart entity and its items."""
        with transaction.atomic():
            fields = {
                'subtotal': cart.subtotal,
                'discount_amount': cart.discount_amount,
                'tax_amount': cart.tax_amount,
                'shipping_cost': cart.shipping_cost,
                'total': cart.total,
                'tax_rate': cart.tax_rate,
                'shipping_threshold': cart.shipping_rule.threshold,
                'shipping_flat_fee': cart.shipping_rule.flat_fee,
                'expires_at': cart.expires_at,
                'updated_at': cart.updated_at,
            }
            if cart.version == 0:
                try:
                    CartModel.objects.create(
                        id=cart.id,
                        user_id=cart.user_id,
                        version=1,
                        created_at=cart.created_at,
                        **fields,
                    )
                except IntegrityError as e:
                    raise ConflictError("Cart", str(cart.id), cart.version) from e
            else:
                updated = CartModel.objects.filter(id=cart.id, version=cart.version).update(
                    version=F('version') + 1,
                    **fields,
                )
                if updated == 0:
                    raise ConflictError("Cart", str(cart.id), cart.version)

            self._save_items(cart)
            model = CartModel.objects.prefetch_related('items').get(id=cart.id)
            return self._to_entity(model)

    def find_by_id(self, cart_id: UUID) -> Optional[Cart]:
        """Find a cart by ID."""
        try:
            model = CartModel.objects.prefetch_related('items').get(id=cart_id)
            return self._to_entity(model)
        except CartModel.DoesNotExist:
            return None

    def find_by_user_id(self, user_id: UUID) -> Optional[Cart]:
        """Find a cart by user ID."""
        try:
            model = CartModel.objects.prefetch_related('items').get(user_id=user_id)
            return self._to_entity(model)
        except CartModel.DoesNotExist:
            return None

    def _save_items(self, cart: Cart) -> None:
        """Replace the stored lines with the cart's current lines."""
        item_ids = [item.id for item in cart.items]
        CartItemModel.objects.filter(cart_id=cart.id).exclude(id__in=item_ids).delete()
        for item in cart.items:
            CartItemModel.objects.update_or_create(
                id=item.id,
                defaults={
                    'cart_id': cart.id,
                    'product_id': item.product_id,
                    'product_name': item.product_name,
                    'variant_id': item.variant_id,
                    'customization_id': item.customization_id,
                    'quantity': item.quantity,
                    'unit_price': item.unit_price,
                    'customization_surcharge': item.customization_surcharge,
                    'line_total': item.line_total,
                    'created_at': item.created_at,
                    'updated_at': item.updated_at,
                }
            )

    def _to_entity(self, model: CartModel) -> Cart:
        """Convert Django model to domain entity."""
        return Cart(
            id=model.id,
            user_id=model.user_id,
            items=[self._item_to_entity(item) for item in model.items.all()],
            subtotal=model.subtotal,
            discount_amount=model.discount_amount,
            tax_amount=model.tax_amount,
            shipping_cost=model.shipping_cost,
            total=model.total,
            tax_rate=model.tax_rate,
            shipping_rule=ShippingRule(
                threshold=model.shipping_threshold,
                flat_fee=model.shipping_flat_fee,
            ),
            expires_at=model.expires_at,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _item_to_entity(self, model: CartItemModel) -> CartItem:
        return CartItem(
            id=model.id,
            cart_id=model.cart_id,
            product_id=model.product_id,
            product_name=model.product_name,
            variant_id=model.variant_id,
            customization_id=model.customization_id,
            quantity=model.quantity,
            unit_price=model.unit_price,
            customization_surcharge=model.customization_surcharge,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

"""
Cart Django ORM models.
"""
import uuid

from django.db import models


class CartModel(models.Model):
    """Cart model, one per user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(unique=True, db_index=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    # Pricing snapshot used for the stored totals
    tax_rate = models.DecimalField(max_digits=6, decimal_places=4, default=0)
    shipping_threshold = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_flat_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    expires_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        app_label = 'carts'
        db_table = 'carts'

    def __str__(self):
        return f"Cart for user {self.user_id}"


class CartItemModel(models.Model):
    """Cart item model."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cart = models.ForeignKey(CartModel, on_delete=models.CASCADE, related_name='items')
    product_id = models.UUIDField(db_index=True)
    product_name = models.CharField(max_length=255)
    variant_id = models.UUIDField(null=True, blank=True, db_index=True)
    customization_id = models.UUIDField(null=True, blank=True, db_index=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    customization_surcharge = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    line_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        app_label = 'carts'
        db_table = 'cart_items'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['cart', 'product_id', 'variant_id'],
                condition=models.Q(customization_id__isnull=True),
                name='uniq_plain_cart_line',
            ),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

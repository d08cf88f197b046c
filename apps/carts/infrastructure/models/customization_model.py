"""
Customization Django ORM model.
"""
import uuid

from django.db import models


class CustomizationModel(models.Model):
    """Customization model."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)
    product_id = models.UUIDField(db_index=True)
    variant_id = models.UUIDField(null=True, blank=True, db_index=True)
    design_id = models.UUIDField(db_index=True)
    thread_color_hex = models.CharField(max_length=7)
    additional_notes = models.CharField(max_length=500, blank=True)
    preview_image_url = models.URLField(max_length=1024, null=True, blank=True)
    is_completed = models.BooleanField(default=True)

    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        app_label = 'carts'
        db_table = 'customizations'
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['user_id', 'product_id'], name='idx_customization_user_prod'),
        ]

    def __str__(self):
        return f"Customization {self.id} of product {self.product_id}"

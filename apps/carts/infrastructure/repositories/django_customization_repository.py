"""
Django ORM implementation of CustomizationRepository.
"""
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction

from ...domain.entities.customization import Customization
from ...domain.repositories.customization_repository import CustomizationRepository
from ...domain.value_objects.thread_color import ThreadColor
from ..models.customization_model import CustomizationModel


class DjangoCustomizationRepository(CustomizationRepository):
    """Django ORM based customization repository implementation."""

    def save(self, customization: Customization) -> Customization:
        """Save a customization entity."""
        with transaction.atomic():
            model, created = CustomizationModel.objects.update_or_create(
                id=customization.id,
                defaults={
                    'user_id': customization.user_id,
                    'product_id': customization.product_id,
                    'variant_id': customization.variant_id,
                    'design_id': customization.design_id,
                    'thread_color_hex': customization.thread_color.value,
                    'additional_notes': customization.additional_notes,
                    'preview_image_url': customization.preview_image_url,
                    'is_completed': customization.is_completed,
                    'created_at': customization.created_at,
                    'updated_at': customization.updated_at,
                }
            )
            return self._to_entity(model)

    def find_by_id(self, customization_id: UUID) -> Optional[Customization]:
        """Find a customization by ID."""
        try:
            model = CustomizationModel.objects.get(id=customization_id)
            return self._to_entity(model)
        except CustomizationModel.DoesNotExist:
            return None

    def find_by_ids(self, customization_ids: Iterable[UUID]) -> List[Customization]:
        """Find the customizations with the given IDs in one query."""
        ids = list(customization_ids)
        if not ids:
            return []
        return [self._to_entity(model) for model in CustomizationModel.objects.filter(id__in=ids)]

    def find_by_user_id(self, user_id: UUID, product_id: Optional[UUID] = None) -> List[Customization]:
        """Find a user's customizations, most recently updated first."""
        queryset = CustomizationModel.objects.filter(user_id=user_id)
        if product_id is not None:
            queryset = queryset.filter(product_id=product_id)
        return [self._to_entity(model) for model in queryset]

    def delete(self, customization_id: UUID) -> bool:
        """Delete a customization by ID."""
        deleted, _ = CustomizationModel.objects.filter(id=customization_id).delete()
        return deleted > 0

    def _to_entity(self, model: CustomizationModel) -> Customization:
        """Convert Django model to domain entity."""
        return Customization(
            id=model.id,
            user_id=model.user_id,
            product_id=model.product_id,
            variant_id=model.variant_id,
            design_id=model.design_id,
            thread_color=ThreadColor(value=model.thread_color_hex),
            additional_notes=model.additional_notes,
            preview_image_url=model.preview_image_url,
            is_completed=model.is_completed,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

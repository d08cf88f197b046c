"""
Customization attachment service.

Validates and records customizations that cart lines can reference, prices
them with the flat surcharge, and cleans up their stored previews.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from ...domain.entities.customization import Customization
from ...domain.exceptions import (
    CustomizationMismatchError,
    CustomizationNotFoundError,
    DesignNotFoundError,
    UnavailableItemError,
)
from ...domain.ports.catalog import DesignLookup
from ...domain.ports.preview_image_store import PreviewImageStore
from ...domain.ports.pricing_configuration import PricingConfiguration
from ...domain.repositories.customization_repository import CustomizationRepository
from ...domain.services import pricing

logger = logging.getLogger(__name__)


class CustomizationService:
    """Customization business logic service."""

    def __init__(
        self,
        customization_repository: CustomizationRepository,
        design_lookup: DesignLookup,
        pricing_configuration: PricingConfiguration,
        preview_store: Optional[PreviewImageStore] = None,
    ):
        self.customization_repository = customization_repository
        self.design_lookup = design_lookup
        self.pricing_configuration = pricing_configuration
        self.preview_store = preview_store

    def attach(
        self,
        user_id: UUID,
        product_id: UUID,
        variant_id: Optional[UUID],
        design_id: UUID,
        thread_color_hex: str,
        additional_notes: Optional[str] = None,
        preview_image: Optional[bytes] = None,
    ) -> Customization:
        """
        Create a customization for a product variant.

        Args:
            user_id: Owner of the customization
            product_id: Customized product
            variant_id: Customized variant, if any
            design_id: Referenced design
            thread_color_hex: Thread color in #RRGGBB form
            additional_notes: Free-text instructions (max 500 chars)
            preview_image: Rendered preview; stored best-effort

        Returns:
            The saved customization

        Raises:
            DesignNotFoundError: If the design does not exist
            UnavailableItemError: If the design is deactivated
            InvalidThreadColorError: If the color is not #RRGGBB
            InvalidCustomizationNotesError: If the notes are too long
        """
        self._ensure_design_available(design_id)

        customization = Customization.create(
            user_id=user_id,
            product_id=product_id,
            variant_id=variant_id,
            design_id=design_id,
            thread_color_hex=thread_color_hex,
            additional_notes=additional_notes,
        )
        saved = self.customization_repository.save(customization)
        logger.info(f"Customization created - customization_id: {saved.id}, design_id: {design_id}")

        if preview_image:
            saved = self._store_preview(saved, preview_image)
        return saved

    def resolve_for_line(
        self,
        user_id: UUID,
        customization_id: UUID,
        product_id: UUID,
        variant_id: Optional[UUID],
    ) -> Customization:
        """
        Load a saved customization so a new cart line can reference it.

        A customization made for the base product fits any of its variants;
        one made for a variant only fits that variant.

        Raises:
            CustomizationNotFoundError: If it does not exist or belongs to another user
            DesignNotFoundError: If its design no longer exists
            UnavailableItemError: If its design is deactivated
            CustomizationMismatchError: If it was made for another product or variant
        """
        customization = self.get(user_id, customization_id)
        self._ensure_design_available(customization.design_id)
        if customization.product_id != product_id:
            raise CustomizationMismatchError(customization_id, "product_id")
        if customization.variant_id is not None and customization.variant_id != variant_id:
            raise CustomizationMismatchError(customization_id, "variant_id")
        return customization

    def surcharge_for(self, customization: Optional[Customization]) -> Decimal:
        """Flat surcharge of a line carrying this customization."""
        return pricing.compute_customization_surcharge(
            customization, self.pricing_configuration.get_customization_surcharge()
        )

    def get(self, user_id: UUID, customization_id: UUID) -> Customization:
        """Get a customization owned by the user."""
        customization = self.customization_repository.find_by_id(customization_id)
        if customization is None or not customization.is_owned_by(user_id):
            raise CustomizationNotFoundError(customization_id)
        return customization

    def list_for_user(self, user_id: UUID, product_id: Optional[UUID] = None) -> List[Customization]:
        """Get a user's saved customizations."""
        return self.customization_repository.find_by_user_id(user_id, product_id=product_id)

    def find_many(self, customization_ids: Iterable[UUID]) -> Dict[UUID, Customization]:
        """Load customizations by ID, skipping missing ones."""
        ids = list(customization_ids)
        if not ids:
            return {}
        return {c.id: c for c in self.customization_repository.find_by_ids(ids)}

    def update_notes(self, customization: Customization, additional_notes: Optional[str]) -> Customization:
        """Replace the notes of a customization; None clears them."""
        updated = Customization(
            id=customization.id,
            created_at=customization.created_at,
            user_id=customization.user_id,
            product_id=customization.product_id,
            variant_id=customization.variant_id,
            design_id=customization.design_id,
            thread_color=customization.thread_color,
            additional_notes=additional_notes or "",
            preview_image_url=customization.preview_image_url,
            is_completed=customization.is_completed,
        )
        return self.customization_repository.save(updated)

    def restore(self, customization: Customization) -> Customization:
        """Write back a previously loaded state of a customization."""
        return self.customization_repository.save(customization)

    def discard(self, customization_id: UUID) -> bool:
        """Delete a customization together with its stored preview."""
        customization = self.customization_repository.find_by_id(customization_id)
        if customization is None:
            return False

        self.delete_preview(customization)
        deleted = self.customization_repository.delete(customization_id)
        logger.info(f"Customization deleted - customization_id: {customization_id}")
        return deleted

    def delete_preview(self, customization: Customization) -> bool:
        """Delete the stored preview. Failures are logged, never raised."""
        if not customization.has_preview or self.preview_store is None:
            return False

        try:
            self.preview_store.delete(customization.preview_image_url)
            return True
        except Exception as e:
            logger.warning(
                f"Failed to delete customization preview {customization.preview_image_url}: {e}",
                exc_info=True,
            )
            return False

    def _ensure_design_available(self, design_id: UUID) -> None:
        design = self.design_lookup.find_design(design_id)
        if design is None:
            raise DesignNotFoundError(design_id)
        if not design.is_active:
            raise UnavailableItemError("Design", design_id)

    def _store_preview(self, customization: Customization, content: bytes) -> Customization:
        if self.preview_store is None:
            logger.warning(f"No preview store configured, skipping preview for {customization.id}")
            return customization

        try:
            url = self.preview_store.upload(content, customization.user_id, customization.id)
        except Exception as e:
            logger.warning(
                f"Preview upload failed for customization {customization.id}: {e}",
                exc_info=True,
            )
            return customization

        customization.attach_preview(url)
        return self.customization_repository.save(customization)

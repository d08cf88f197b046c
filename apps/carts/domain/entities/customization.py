"""
Customization entity.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain import BaseEntity
from ..exceptions import InvalidCustomizationNotesError
from ..value_objects.thread_color import ThreadColor

MAX_NOTES_LENGTH = 500


@dataclass(eq=False)
class Customization(BaseEntity):
    """User-designed personalization of a product variant."""
    user_id: UUID
    product_id: UUID
    design_id: UUID
    thread_color: ThreadColor
    variant_id: Optional[UUID] = None
    additional_notes: str = ""
    preview_image_url: Optional[str] = None
    is_completed: bool = True

    def __post_init__(self):
        self.additional_notes = self.additional_notes or ""
        if len(self.additional_notes) > MAX_NOTES_LENGTH:
            raise InvalidCustomizationNotesError(MAX_NOTES_LENGTH)

    @classmethod
    def create(
        cls,
        user_id: UUID,
        product_id: UUID,
        variant_id: Optional[UUID],
        design_id: UUID,
        thread_color_hex: str,
        additional_notes: Optional[str] = None,
    ) -> 'Customization':
        """Factory method to create a finalized customization."""
        return cls(
            user_id=user_id,
            product_id=product_id,
            variant_id=variant_id,
            design_id=design_id,
            thread_color=ThreadColor(value=thread_color_hex),
            additional_notes=additional_notes or "",
        )

    @property
    def has_preview(self) -> bool:
        """Check if a preview image is stored for this customization."""
        return bool(self.preview_image_url)

    def attach_preview(self, url: str) -> None:
        """Record the stored preview image reference."""
        self.preview_image_url = url
        self.touch()

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.user_id == user_id

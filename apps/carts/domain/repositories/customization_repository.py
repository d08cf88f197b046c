"""
Customization repository interface.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from ..entities.customization import Customization


class CustomizationRepository(ABC):
    """Abstract repository for customizations."""

    @abstractmethod
    def save(self, customization: Customization) -> Customization:
        """Save a customization."""
        pass

    @abstractmethod
    def find_by_id(self, customization_id: UUID) -> Optional[Customization]:
        """Find a customization by ID."""
        pass

    @abstractmethod
    def find_by_ids(self, customization_ids: Iterable[UUID]) -> List[Customization]:
        """Find the customizations with the given IDs, skipping missing ones."""
        pass

    @abstractmethod
    def find_by_user_id(self, user_id: UUID, product_id: Optional[UUID] = None) -> List[Customization]:
        """Find a user's customizations, optionally for one product."""
        pass

    @abstractmethod
    def delete(self, customization_id: UUID) -> bool:
        """Delete a customization."""
        pass

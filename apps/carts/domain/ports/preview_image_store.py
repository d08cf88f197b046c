"""
Preview image storage.
"""
from abc import ABC, abstractmethod
from uuid import UUID


class PreviewImageStore(ABC):
    """Stores rendered customization previews."""

    @abstractmethod
    def upload(
        self,
        content: bytes,
        owner_id: UUID,
        customization_id: UUID,
        content_type: str = "image/png",
    ) -> str:
        """Store a preview and return its URL."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a stored preview by key or by the URL returned from upload."""
        pass

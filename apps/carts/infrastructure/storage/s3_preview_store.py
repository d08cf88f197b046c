"""
S3 backed preview image store.
"""
import logging
from typing import Optional
from uuid import UUID

from shared.infrastructure.storage import S3Storage
from ...domain.ports.preview_image_store import PreviewImageStore

logger = logging.getLogger(__name__)

PREVIEW_FOLDER = "customizations"
EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


class S3PreviewImageStore(PreviewImageStore):
    """Stores previews under customizations/{owner_id}/{customization_id}.{ext}."""

    def __init__(self, storage: Optional[S3Storage] = None):
        self.storage = storage or S3Storage()

    def upload(
        self,
        content: bytes,
        owner_id: UUID,
        customization_id: UUID,
        content_type: str = "image/png",
    ) -> str:
        key = self.build_key(owner_id, customization_id, content_type)
        url = self.storage.upload_bytes(content, key, content_type=content_type)
        logger.info(f"Preview uploaded - customization_id: {customization_id}, key: {key}")
        return url

    def delete(self, key: str) -> None:
        object_key = self.storage.key_from_url(key)
        if not self.storage.delete_file(object_key):
            logger.warning(f"Preview could not be deleted - key: {object_key}")

    @staticmethod
    def build_key(owner_id: UUID, customization_id: UUID, content_type: str = "image/png") -> str:
        extension = EXTENSIONS.get(content_type, ".png")
        return f"{PREVIEW_FOLDER}/{owner_id}/{customization_id}{extension}"

from .s3_preview_store import S3PreviewImageStore

__all__ = ['S3PreviewImageStore']

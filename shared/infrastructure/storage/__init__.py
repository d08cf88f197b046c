from .s3_storage import S3Storage

__all__ = ['S3Storage']

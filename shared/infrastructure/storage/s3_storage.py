"""
S3 storage implementation.
"""
import logging
from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import ClientError
from django.conf import settings

logger = logging.getLogger(__name__)


class S3Storage:
    """S3 storage wrapper."""

    def __init__(self, client=None, bucket: Optional[str] = None, base_url: Optional[str] = None):
        if client is None:
            client = boto3.client(
                's3',
                endpoint_url=getattr(settings, 'AWS_S3_ENDPOINT_URL', None),
                aws_access_key_id=getattr(settings, 'AWS_ACCESS_KEY_ID', None),
                aws_secret_access_key=getattr(settings, 'AWS_SECRET_ACCESS_KEY', None),
                region_name=getattr(settings, 'AWS_S3_REGION_NAME', None),
            )
        self.client = client
        self.bucket = bucket or settings.AWS_STORAGE_BUCKET_NAME
        if base_url is None:
            endpoint = getattr(settings, 'AWS_S3_ENDPOINT_URL', None)
            if endpoint:
                base_url = f"{endpoint.rstrip('/')}/{self.bucket}"
            else:
                region = getattr(settings, 'AWS_S3_REGION_NAME', None) or 'us-east-1'
                base_url = f"https://{self.bucket}.s3.{region}.amazonaws.com"
        self.base_url = base_url.rstrip('/')

    def upload_bytes(self, content: bytes, key: str, content_type: Optional[str] = None) -> str:
        """Upload raw bytes to S3 and return the URL."""
        extra_args = {}
        if content_type:
            extra_args['ContentType'] = content_type

        self.client.put_object(Bucket=self.bucket, Key=key, Body=content, **extra_args)
        return self.get_url(key)

    def delete_file(self, key: str) -> bool:
        """Delete a file from S3."""
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            logger.warning(f"S3 delete failed for {key}: {e}")
            return False

    def get_url(self, key: str) -> str:
        """Get the URL for a file."""
        return f"{self.base_url}/{key}"

    def key_from_url(self, url_or_key: str) -> str:
        """Turn a URL returned by get_url back into an object key."""
        prefix = f"{self.base_url}/"
        if url_or_key.startswith(prefix):
            return url_or_key[len(prefix):]
        if '://' in url_or_key:
            path = urlparse(url_or_key).path.lstrip('/')
            bucket_prefix = f"{self.bucket}/"
            return path[len(bucket_prefix):] if path.startswith(bucket_prefix) else path
        return url_or_key

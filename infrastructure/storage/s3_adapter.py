"""
S3 Storage Adapter
==================

Concrete implementation of StorageInterface using AWS S3 via django-storages.
"""

import logging

from django.conf import settings
from storages.backends.s3boto3 import S3Boto3Storage

from .interface import StorageException, StorageInterface

logger = logging.getLogger(__name__)


class S3StorageAdapter(StorageInterface):
    """
    AWS S3 storage implementation using django-storages.

    Configuration (in settings.py):
        AWS_ACCESS_KEY_ID: AWS access key
        AWS_SECRET_ACCESS_KEY: AWS secret key
        AWS_STORAGE_BUCKET_NAME: S3 bucket name
        AWS_S3_REGION_NAME: AWS region
        AWS_S3_ENDPOINT_URL: MinIO endpoint (optional)
    """

    def __init__(self):
        self.storage = S3Boto3Storage()
        self._bucket_name = getattr(settings, "AWS_STORAGE_BUCKET_NAME", "default-bucket")

    def get_url(self, key: str, expires_in: int = 3600) -> str:
        try:
            # Signed when AWS_QUERYSTRING_AUTH is enabled
            return self.storage.url(key, expire=expires_in)
        except Exception as e:
            logger.error(f"Failed to generate URL for S3 key: {key}. Error: {str(e)}")
            raise StorageException(f"URL generation failed: {str(e)}") from e

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            logger.error(f"Error checking existence of S3 key: {key}. Error: {str(e)}")
            return False

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

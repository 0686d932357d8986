"""
Local Storage Adapter
=====================

StorageInterface backed by Django's default file storage.
"""

import logging

from django.core.files.storage import default_storage

from .interface import StorageException, StorageInterface

logger = logging.getLogger(__name__)


class LocalStorageAdapter(StorageInterface):
    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def get_url(self, key: str, expires_in: int = 3600) -> str:
        try:
            return self.storage.url(key)
        except Exception as e:
            logger.error(f"Failed to generate URL for key: {key}. Error: {str(e)}")
            raise StorageException(f"URL generation failed: {str(e)}") from e

    def exists(self, key: str) -> bool:
        return self.storage.exists(key)

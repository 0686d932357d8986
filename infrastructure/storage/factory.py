"""
Storage Factory
===============

Factory pattern for creating storage backends from configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .interface import StorageInterface
from .local_adapter import LocalStorageAdapter
from .s3_adapter import S3StorageAdapter

logger = logging.getLogger(__name__)

StorageBackend = Literal["s3", "local"]


class StorageFactory:
    """
    Factory for creating the upload store backend.

    Usage:
        storage = StorageFactory.create()
    """

    @staticmethod
    def create(backend: StorageBackend | None = None) -> StorageInterface:
        """
        Create a storage backend instance.

        Args:
            backend: 's3' or 'local'; defaults to settings.INFRASTRUCTURE["STORAGE_BACKEND"]

        Raises:
            ValueError: If backend type is invalid
        """
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("STORAGE_BACKEND", "s3")

        logger.info(f"Creating storage backend: {backend_type}")

        if backend_type == "s3":
            return S3StorageAdapter()
        if backend_type == "local":
            return LocalStorageAdapter()
        raise ValueError(f"Invalid storage backend: {backend_type}")

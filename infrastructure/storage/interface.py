"""
Storage Interface
=================

Read-side contract for the upload store. Uploading is done by the client
against the bucket directly; the backend only stores image references on cart
items and resolves them to URLs when presenting them.
"""

from abc import ABC, abstractmethod


class StorageInterface(ABC):
    """
    Abstract interface for resolving stored uploads.

    Concrete implementations:
        - S3StorageAdapter: AWS S3 / MinIO through django-storages
        - LocalStorageAdapter: Django's default file storage (development, tests)
    """

    @abstractmethod
    def get_url(self, key: str, expires_in: int = 3600) -> str:
        """
        Get a URL to access a stored file.

        Raises:
            StorageException: If URL generation fails
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether a file exists in storage."""
        pass


class StorageException(Exception):
    """Base exception for storage operations."""

    pass

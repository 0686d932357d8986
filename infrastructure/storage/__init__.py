"""
Storage Abstraction Layer
==========================

Resolves image references stored on cart items (S3/MinIO or local storage).
"""

from .factory import StorageFactory
from .interface import StorageException, StorageInterface
from .local_adapter import LocalStorageAdapter
from .s3_adapter import S3StorageAdapter

__all__ = [
    "StorageInterface",
    "StorageException",
    "S3StorageAdapter",
    "LocalStorageAdapter",
    "StorageFactory",
]

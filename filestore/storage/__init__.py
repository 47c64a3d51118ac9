"""
Storage abstraction layer for file operations.

This package provides one interface for storing files either on the local
filesystem or in an S3-compatible object store, plus a facade that adds
content-addressed uploads and public URL resolution.
"""

from filestore.storage.base import StorageBackend
from filestore.storage.exceptions import (
    InvalidInputError,
    NotFoundError,
    StorageError,
    TransportError,
)
from filestore.storage.facade import Storage
from filestore.storage.local import LocalStorageBackend, LocalStorageConfig
from filestore.storage.s3 import S3StorageBackend, S3StorageConfig

__all__ = [
    "Storage",
    "StorageBackend",
    "LocalStorageBackend",
    "LocalStorageConfig",
    "S3StorageBackend",
    "S3StorageConfig",
    "StorageError",
    "InvalidInputError",
    "NotFoundError",
    "TransportError",
]

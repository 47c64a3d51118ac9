"""
Storage dependency injection for FastAPI.

This module builds the storage facade once per process from configuration
and exposes it as a FastAPI dependency.
"""
from functools import lru_cache

from filestore.config import Settings, StorageBackendType, settings
from filestore.storage.base import StorageBackend
from filestore.storage.facade import Storage
from filestore.storage.local import LocalStorageBackend, LocalStorageConfig
from filestore.storage.s3 import S3StorageBackend, S3StorageConfig


def build_backend(config: Settings) -> StorageBackend:
    """
    Create the storage backend selected by STORAGE_BACKEND.

    Args:
        config: Application settings

    Returns:
        StorageBackend instance (local or S3)

    Raises:
        ValueError: If STORAGE_BACKEND is not supported
    """
    if config.STORAGE_BACKEND == StorageBackendType.LOCAL:
        return LocalStorageBackend(
            LocalStorageConfig(
                root_directory=config.STORAGE_BASE_PATH,
                base_url=config.BASE_URL,
                api_path=config.API_PATH,
            )
        )

    if config.STORAGE_BACKEND == StorageBackendType.S3:
        return S3StorageBackend(
            S3StorageConfig(
                bucket_name=config.S3_BUCKET_NAME,
                region=config.S3_REGION,
                access_key=config.S3_ACCESS_KEY,
                secret_key=config.S3_SECRET_KEY,
                endpoint_url=config.S3_ENDPOINT_URL,
                acl=config.S3_ACL or None,
                large_upload_acl=config.S3_LARGE_UPLOAD_ACL or None,
                content_type=config.CONTENT_TYPE,
                part_size=config.S3_PART_SIZE_MB * 1024 * 1024,
            )
        )

    raise ValueError(f"Unknown storage backend: {config.STORAGE_BACKEND}")


def build_storage(config: Settings) -> Storage:
    return Storage(build_backend(config), base_public_url=config.BASE_PUBLIC_URL)


@lru_cache
def get_storage() -> Storage:
    """
    Return the process-wide storage facade.

    Switch between local and S3 storage by changing the STORAGE_BACKEND
    environment variable.
    """
    return build_storage(settings)

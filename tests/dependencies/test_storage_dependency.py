"""
Tests for storage backend selection.
"""
import pytest

from filestore.config import Settings, StorageBackendType
from filestore.dependencies.storage import build_backend, build_storage, get_storage
from filestore.storage.facade import Storage
from filestore.storage.local import LocalStorageBackend
from filestore.storage.s3 import S3StorageBackend


def test_local_backend_is_default(tmp_path):
    backend = build_backend(Settings(STORAGE_BASE_PATH=str(tmp_path)))

    assert isinstance(backend, LocalStorageBackend)
    assert backend.config.root_directory == str(tmp_path)
    assert backend.config.api_path == "/api/v1/files"


def test_s3_backend_from_settings():
    config = Settings(
        STORAGE_BACKEND="s3",
        S3_BUCKET_NAME="uploads",
        S3_REGION="eu-west-1",
        S3_ACCESS_KEY="testing",
        S3_SECRET_KEY="testing",
        S3_ACL="",
        S3_PART_SIZE_MB=8,
    )

    backend = build_backend(config)

    assert config.STORAGE_BACKEND == StorageBackendType.S3
    assert isinstance(backend, S3StorageBackend)
    assert backend.bucket == "uploads"
    assert backend.config.acl is None
    assert backend.config.large_upload_acl == "authenticated-read"
    assert backend.part_size == 8 * 1024 * 1024
    assert backend.client.meta.region_name == "eu-west-1"


def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError):
        Settings(STORAGE_BACKEND="ftp")


def test_build_storage_uses_public_url(tmp_path):
    storage = build_storage(
        Settings(STORAGE_BASE_PATH=str(tmp_path), BASE_PUBLIC_URL="https://cdn.example.com")
    )

    assert isinstance(storage, Storage)
    assert storage.resolve("a.gif") == "https://cdn.example.com/a.gif"


def test_get_storage_is_a_process_singleton():
    get_storage.cache_clear()
    try:
        assert get_storage() is get_storage()
    finally:
        get_storage.cache_clear()

import pytest
from botocore.stub import Stubber
from fastapi.testclient import TestClient

from filestore.dependencies.storage import get_storage
from filestore.main import create_app
from filestore.storage.facade import Storage
from filestore.storage.local import LocalStorageBackend, LocalStorageConfig
from filestore.storage.s3 import S3StorageBackend, S3StorageConfig
from tests.constants import API_PATH, BASE_PUBLIC_URL, BASE_URL, BUCKET_NAME


class RecordingStorageBackend(LocalStorageBackend):
    """
    Local storage backend that records every upload call.

    Used to assert that an operation did (or did not) write to storage.
    """

    def __init__(self, config: LocalStorageConfig):
        super().__init__(config)
        self.uploads: list[str] = []

    async def upload(self, key, content, base64_encoded=True):
        self.uploads.append(key)
        return await super().upload(key, content, base64_encoded)


@pytest.fixture
def local_config(tmp_path):
    return LocalStorageConfig(
        root_directory=str(tmp_path),
        base_url=BASE_URL,
        api_path=API_PATH,
    )


@pytest.fixture
def local_backend(local_config):
    return RecordingStorageBackend(local_config)


@pytest.fixture
def s3_backend():
    return S3StorageBackend(
        S3StorageConfig(
            bucket_name=BUCKET_NAME,
            region="us-east-1",
            access_key="testing",
            secret_key="testing",
        )
    )


@pytest.fixture
def s3_stub(s3_backend):
    """Stub S3 responses; every queued response must be consumed."""
    with Stubber(s3_backend.client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def storage(local_backend):
    return Storage(local_backend, base_public_url=BASE_PUBLIC_URL)


@pytest.fixture
def client(storage):
    """Test client with the storage dependency pointing at a temp directory."""
    app = create_app(api_path=API_PATH, enable_upload=True)
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

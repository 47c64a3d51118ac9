from enum import Enum

from pydantic_settings import BaseSettings


class StorageBackendType(str, Enum):
    LOCAL = "local"
    S3 = "s3"


class Settings(BaseSettings):
    # Storage settings
    STORAGE_BACKEND: StorageBackendType = StorageBackendType.LOCAL
    STORAGE_BASE_PATH: str = "storage/data"

    # Public URLs
    BASE_URL: str = "http://localhost:8000"
    API_PATH: str = "/api/v1/files"
    BASE_PUBLIC_URL: str = "http://localhost:8000/static"

    # Presigned upload settings
    PRESIGNED_URL_EXPIRES_SECONDS: int = 900  # 15 minutes
    CONTENT_TYPE: str = "multipart/form-data"
    ENABLE_UPLOAD: bool = True  # relay uploads through PUT <API_PATH>/<key>

    # S3 settings
    S3_BUCKET_NAME: str = ""
    S3_REGION: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_ENDPOINT_URL: str | None = None  # MinIO / S3-compatible stores
    S3_ACL: str = "public-read"  # empty string sends no ACL
    S3_LARGE_UPLOAD_ACL: str = "authenticated-read"
    S3_PART_SIZE_MB: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"

    # "extra": "ignore" drops environment variables that have no field here
    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

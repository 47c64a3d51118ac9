"""
Presigned upload API endpoints.

POST <API_PATH>/temp hands out a temporary key and a presigned PUT URL. When
relay uploads are enabled, PUT <API_PATH>/<key> accepts the file itself and
streams it into storage; this is where presigned URLs of the local backend
point to.
"""
import uuid
from typing import AsyncIterator

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from filestore.config import settings
from filestore.dependencies.storage import get_storage
from filestore.logging_config import setup_logging
from filestore.schemas.presigned import PresignedUploadResponse
from filestore.storage.facade import Storage

CHUNK_SIZE = 64 * 1024  # 64KB

logger = setup_logging()


async def _iter_upload_file(file: UploadFile) -> AsyncIterator[bytes]:
    while chunk := await file.read(CHUNK_SIZE):
        yield chunk


def create_presigned_router(
    api_path: str | None = None,
    enable_upload: bool | None = None,
) -> APIRouter:
    """
    Build the presigned upload router.

    Args:
        api_path: Path prefix of the routes (default from config)
        enable_upload: Whether to register the relay PUT route
            (default from config)

    Returns:
        APIRouter with the presigned upload routes
    """
    if api_path is None:
        api_path = settings.API_PATH
    if enable_upload is None:
        enable_upload = settings.ENABLE_UPLOAD

    router = APIRouter(prefix=api_path, tags=["files"])

    @router.post(
        "/temp",
        response_model=PresignedUploadResponse,
        status_code=status.HTTP_200_OK,
    )
    async def create_temp_upload(storage: Storage = Depends(get_storage)):
        """
        Reserve a temporary key and return a presigned PUT URL for it.

        **Returns:**
        - key: `temp/<uuid>` key the file will be stored under
        - url: URL to PUT the file to
        - contentType: Content type the upload must be sent with
        """
        key = f"temp/{uuid.uuid4()}"
        url = await storage.get_presigned_put_url(
            key, expires=settings.PRESIGNED_URL_EXPIRES_SECONDS
        )

        logger.info(f"Presigned upload created: key={key}")

        return PresignedUploadResponse(key=key, url=url, content_type=settings.CONTENT_TYPE)

    if enable_upload:

        @router.put("/{key:path}", status_code=status.HTTP_200_OK)
        async def relay_upload(
            key: str,
            file: UploadFile = File(...),
            storage: Storage = Depends(get_storage),
        ):
            """
            Store an uploaded file under key.

            **Request (multipart/form-data):**
            - file: The file content
            """
            try:
                await storage.upload_data(key, _iter_upload_file(file))
            except Exception as e:
                logger.warning(f"Relay upload failed: key={key}, error={e}")
                raise
            finally:
                await file.close()

            logger.info(f"Relay upload stored: key={key}")
            return Response(status_code=status.HTTP_200_OK)

    return router

"""
S3 object storage implementation.

Works against AWS S3 or any S3-compatible store (MinIO) through boto3. The
boto3 client is blocking, so every request runs in a worker thread.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from filestore.logging_config import setup_logging
from filestore.storage.base import (
    DEFAULT_PRESIGNED_EXPIRES,
    StorageBackend,
    UploadContent,
    is_stream,
    to_bytes,
)
from filestore.storage.exceptions import TransportError

logger = setup_logging()

CHUNK_SIZE = 64 * 1024  # 64KB
MIN_PART_SIZE = 5 * 1024 * 1024  # S3 rejects smaller non-final parts


@dataclass(frozen=True)
class S3StorageConfig:
    """
    Settings for the S3 backend.

    Attributes:
        bucket_name: Bucket all keys are stored in
        region: AWS region of the bucket
        access_key: Access key id; None falls back to boto3's credential chain
        secret_key: Secret access key
        endpoint_url: Custom endpoint for S3-compatible stores
        acl: Canned ACL for buffered uploads (None sends no ACL)
        large_upload_acl: Canned ACL for streamed multipart uploads
        content_type: Content type presigned PUT URLs are signed for
        part_size: Multipart part size in bytes
    """

    bucket_name: str
    region: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    endpoint_url: str | None = None
    acl: str | None = "public-read"
    large_upload_acl: str | None = "authenticated-read"
    content_type: str = "multipart/form-data"
    part_size: int = 10 * 1024 * 1024  # 10MB


class S3StorageBackend(StorageBackend):
    """
    S3 object storage.

    Native semantics are kept: removing a missing key succeeds silently.
    Request failures are raised as TransportError carrying the HTTP status
    and S3 error code.
    """

    def __init__(self, config: S3StorageConfig, client: Any | None = None):
        self.config = config
        self.bucket = config.bucket_name
        self.part_size = max(config.part_size, MIN_PART_SIZE)
        self.client = client or boto3.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            config=Config(signature_version="s3v4"),
        )

    async def upload(
        self,
        key: str,
        content: UploadContent,
        base64_encoded: bool = True,
    ) -> str:
        """
        Upload content to the bucket.

        Buffered content goes up in a single PutObject. Streams go up as a
        multipart upload, one part at a time; if the stream fails the
        multipart upload is aborted so no partial object is left behind.

        Returns:
            The stored key (as confirmed by S3 for multipart uploads)
        """
        if is_stream(content):
            return await self._multipart_upload(key, content)

        params = self._params(key)
        params["Body"] = to_bytes(content, base64_encoded)
        if self.config.acl:
            params["ACL"] = self.config.acl

        await self._call("put_object", **params)
        return key

    async def exists(self, key: str) -> bool:
        try:
            await self._call("head_object", **self._params(key))
        except TransportError as e:
            if e.is_not_found:
                return False
            raise
        return True

    async def fetch_text(self, key: str) -> str:
        response = await self._call("get_object", **self._params(key))
        body = response["Body"]
        try:
            data = await self._run("get_object", body.read)
        finally:
            body.close()
        return data.decode("utf-8")

    async def fetch_stream(self, key: str) -> AsyncIterator[bytes]:
        response = await self._call("get_object", **self._params(key))
        body = response["Body"]
        try:
            chunks = body.iter_chunks(CHUNK_SIZE)
            while chunk := await self._run("get_object", next, chunks, b""):
                yield chunk
        finally:
            body.close()

    async def remove(self, key: str) -> None:
        await self._call("delete_object", **self._params(key))

    async def copy(self, source: str, dest: str) -> None:
        """Server-side copy; no bytes pass through this process."""
        await self._call(
            "copy_object",
            CopySource={"Bucket": self.bucket, "Key": source},
            **self._params(dest),
        )

    async def get_presigned_put_url(
        self,
        key: str,
        expires: int = DEFAULT_PRESIGNED_EXPIRES,
    ) -> str:
        """
        Request a presigned URL for a PUT of key.

        The URL is signed for the configured content type, so the client
        must send the same Content-Type header.

        Args:
            key: A unique key to identify the upload
            expires: Number of seconds the URL stays valid (default 15 mins)
        """
        params = self._params(key)
        params["ContentType"] = self.config.content_type
        return self.client.generate_presigned_url(
            "put_object",
            Params=params,
            ExpiresIn=expires,
        )

    async def get_presigned_get_url(
        self,
        key: str,
        expires: int = DEFAULT_PRESIGNED_EXPIRES,
    ) -> str:
        """
        Request a presigned URL for a GET of key.

        Args:
            key: Key of the object to download
            expires: Number of seconds the URL stays valid (default 15 mins)
        """
        return self.client.generate_presigned_url(
            "get_object",
            Params=self._params(key),
            ExpiresIn=expires,
        )

    async def _multipart_upload(self, key: str, stream: AsyncIterator[bytes]) -> str:
        params = self._params(key)
        create_params = dict(params)
        if self.config.large_upload_acl:
            create_params["ACL"] = self.config.large_upload_acl

        upload = await self._call("create_multipart_upload", **create_params)
        upload_id = upload["UploadId"]
        parts = []

        try:
            async for body in self._iter_parts(stream):
                part_number = len(parts) + 1
                response = await self._call(
                    "upload_part",
                    Body=body,
                    PartNumber=part_number,
                    UploadId=upload_id,
                    **params,
                )
                parts.append({"ETag": response["ETag"], "PartNumber": part_number})

            result = await self._call(
                "complete_multipart_upload",
                MultipartUpload={"Parts": parts},
                UploadId=upload_id,
                **params,
            )
        except BaseException:
            logger.warning(f"Aborting multipart upload: key={key}, upload_id={upload_id}")
            try:
                await self._call("abort_multipart_upload", UploadId=upload_id, **params)
            except TransportError as abort_error:
                logger.error(f"Failed to abort multipart upload {upload_id}: {abort_error}")
            raise

        return result.get("Key", key)

    async def _iter_parts(self, stream: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
        """
        Regroup stream chunks into parts of at least part_size bytes.

        Always yields at least one (possibly empty) part.
        """
        buffer = bytearray()
        yielded = False

        async for chunk in stream:
            buffer.extend(chunk)
            if len(buffer) >= self.part_size:
                yield bytes(buffer)
                buffer.clear()
                yielded = True

        if buffer or not yielded:
            yield bytes(buffer)

    async def _call(self, operation: str, **params) -> dict:
        return await self._run(operation, getattr(self.client, operation), **params)

    async def _run(self, operation: str, func, *args, **kwargs) -> Any:
        """
        Run a blocking boto3 call (or response body read) in a worker thread.

        Raises:
            TransportError: On any botocore failure, including errors while
                reading a response body
        """
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            raise TransportError(
                f"S3 {operation} failed: {e}",
                status_code=e.response.get("ResponseMetadata", {}).get("HTTPStatusCode"),
                code=error.get("Code"),
            ) from e
        except BotoCoreError as e:
            raise TransportError(f"S3 {operation} failed: {e}") from e

    def _params(self, key: str) -> dict:
        return {"Bucket": self.bucket, "Key": key}

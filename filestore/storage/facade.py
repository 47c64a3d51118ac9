"""
Storage facade used by the rest of the application.

Wraps exactly one storage backend and adds content-addressed uploads of
data-urls, a uniform NotFoundError for missing files, and resolution of keys
into public URLs.
"""
import json
from typing import Any, AsyncIterator

from filestore.logging_config import setup_logging
from filestore.storage.base import DEFAULT_PRESIGNED_EXPIRES, StorageBackend, UploadContent
from filestore.storage.data_url import (
    decode_base64,
    generate_filename,
    is_data_url,
    split_data_url,
)
from filestore.storage.exceptions import InvalidInputError, NotFoundError, TransportError

logger = setup_logging()


def _is_missing(error: Exception) -> bool:
    """Whether a backend error means the object is absent."""
    if isinstance(error, FileNotFoundError):
        return True
    return isinstance(error, TransportError) and error.is_not_found


class Storage:
    """
    Single entry point for file storage.

    Args:
        backend: The configured storage backend
        base_public_url: URL prefix stored keys are served from
    """

    def __init__(self, backend: StorageBackend, base_public_url: str):
        self.backend = backend
        self.base_public_url = base_public_url

    async def upload(self, file_content: str) -> str | None:
        """
        Upload a data-url under a content-addressed filename.

        Args:
            file_content: ``data:<type>/<subtype>;base64,<payload>``

        Returns:
            The md5 based filename, or None if identical content with the
            same extension is already stored (nothing is written)

        Raises:
            InvalidInputError: If file_content is not a data-url
        """
        split = split_data_url(file_content)
        if split is None:
            raise InvalidInputError(f"Invalid fileContent: {str(file_content)[:200]}")

        extension, payload = split
        data = decode_base64(payload)
        filename = generate_filename(data, extension)

        if await self.backend.exists(filename):
            logger.info(f"Skipping upload, content already stored: {filename}")
            return None

        await self.backend.upload(filename, data, base64_encoded=False)
        logger.info(f"Uploaded file: {filename} ({len(data)} bytes)")
        return filename

    async def upload_json(self, name: str, content: Any) -> str:
        """
        Upload JSON under a caller-chosen name, overwriting any existing file.

        Args:
            name: Key for the JSON file
            content: Object to serialize, or an already serialized string
        """
        if not isinstance(content, str):
            content = json.dumps(content)
        return await self.backend.upload(name, content, base64_encoded=False)

    async def upload_data(self, name: str, content: UploadContent) -> str:
        """Upload bytes, text or a byte stream verbatim under name."""
        return await self.backend.upload(name, content, base64_encoded=False)

    async def fetch_text(self, key: str) -> str:
        """
        Read a text file.

        Raises:
            NotFoundError: If key is not stored
        """
        if not await self.backend.exists(key):
            raise NotFoundError(key)
        try:
            return await self.backend.fetch_text(key)
        except (FileNotFoundError, TransportError) as e:
            if _is_missing(e):
                raise NotFoundError(key) from e
            raise

    async def fetch_stream(self, key: str) -> AsyncIterator[bytes]:
        """
        Open a file as an async byte stream.

        Raises:
            NotFoundError: If key is not stored. Absence detected while the
                stream is being read is raised as NotFoundError too.
        """
        if not await self.backend.exists(key):
            raise NotFoundError(key)
        return self._guard_stream(key, self.backend.fetch_stream(key))

    def resolve(self, file: str) -> str:
        """
        Resolve a data-url or a stored key to something a client can load.

        Data-urls are returned unchanged; keys become public URLs.
        """
        return file if is_data_url(file) else f"{self.base_public_url}/{file}"

    async def remove(self, key: str) -> None:
        await self.backend.remove(key)
        logger.info(f"Removed file: {key}")

    async def copy(self, source: str, dest: str) -> None:
        await self.backend.copy(source, dest)

    async def exists(self, key: str) -> bool:
        return await self.backend.exists(key)

    async def get_presigned_put_url(
        self,
        key: str,
        expires: int = DEFAULT_PRESIGNED_EXPIRES,
    ) -> str:
        return await self.backend.get_presigned_put_url(key, expires=expires)

    async def _guard_stream(
        self,
        key: str,
        stream: AsyncIterator[bytes],
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in stream:
                yield chunk
        except (FileNotFoundError, TransportError) as e:
            if _is_missing(e):
                raise NotFoundError(key) from e
            raise
        finally:
            await stream.aclose()

"""
Local filesystem storage implementation.

This module provides a local filesystem implementation of the storage backend
with async file operations. Keys map directly to paths under a root directory,
mirroring how keys are laid out in an S3 bucket.
"""
import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from filestore.storage.base import (
    DEFAULT_PRESIGNED_EXPIRES,
    StorageBackend,
    UploadContent,
    is_stream,
    to_bytes,
)
from filestore.storage.exceptions import InvalidInputError

CHUNK_SIZE = 64 * 1024  # 64KB


@dataclass(frozen=True)
class LocalStorageConfig:
    """
    Settings for the local backend.

    Attributes:
        root_directory: Directory all keys are stored under
        base_url: Public URL of this application (e.g. "http://localhost:8000")
        api_path: Path the upload relay route is mounted at
    """

    root_directory: str
    base_url: str = ""
    api_path: str = ""


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage with async operations.

    Native semantics are kept: removing or reading a missing key raises the
    builtin FileNotFoundError.
    """

    def __init__(self, config: LocalStorageConfig):
        self.config = config
        self.root = Path(config.root_directory)

    async def upload(
        self,
        key: str,
        content: UploadContent,
        base64_encoded: bool = True,
    ) -> str:
        """
        Write content to disk, creating parent directories as needed.

        Streams are written chunk by chunk. If the stream fails (or the
        upload is cancelled) the partial file is removed before the error
        propagates.
        """
        file_path = self._get_file_path(key)
        self._ensure_directory_exists(file_path)

        if not is_stream(content):
            data = to_bytes(content, base64_encoded)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
            return key

        try:
            async with aiofiles.open(file_path, "wb") as f:
                async for chunk in content:
                    await f.write(chunk)
        except BaseException:
            # Clean up partial file on error
            if await aiofiles.os.path.exists(file_path):
                await aiofiles.os.remove(file_path)
            raise

        return key

    async def exists(self, key: str) -> bool:
        return await aiofiles.os.path.isfile(self._get_file_path(key))

    async def fetch_text(self, key: str) -> str:
        async with aiofiles.open(self._get_file_path(key), "rb") as f:
            data = await f.read()
        return data.decode("utf-8")

    async def fetch_stream(self, key: str) -> AsyncIterator[bytes]:
        file_path = self._get_file_path(key)
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(CHUNK_SIZE):
                yield chunk

    async def remove(self, key: str) -> None:
        """
        Delete a file.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        await aiofiles.os.remove(self._get_file_path(key))

    async def copy(self, source: str, dest: str) -> None:
        source_path = self._get_file_path(source)
        dest_path = self._get_file_path(dest)
        self._ensure_directory_exists(dest_path)
        await asyncio.to_thread(shutil.copyfile, source_path, dest_path)

    async def get_presigned_put_url(
        self,
        key: str,
        expires: int = DEFAULT_PRESIGNED_EXPIRES,
    ) -> str:
        """
        Return the URL of this application's upload relay route for key.

        Local storage cannot hand out time-limited direct URLs, so uploads
        always go back through the application and expires is ignored.
        """
        return f"{self.config.base_url}{self.config.api_path}/{key}"

    def _get_file_path(self, key: str) -> Path:
        """
        Map a key to a path under the root directory.

        Raises:
            InvalidInputError: If the key is absolute or escapes the root
        """
        parts = PurePosixPath(key).parts
        if not key or key.startswith("/") or ".." in parts:
            raise InvalidInputError(f"Invalid storage key: {key!r}")
        return self.root.joinpath(*parts)

    def _ensure_directory_exists(self, file_path: Path) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)

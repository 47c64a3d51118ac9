"""
Abstract base class for storage backends.

This module defines the interface that all storage backends must implement,
so the storage facade stays backend-agnostic.
"""
from abc import ABC, abstractmethod
from typing import AsyncIterator

from filestore.storage.data_url import decode_base64

DEFAULT_PRESIGNED_EXPIRES = 900

UploadContent = bytes | str | AsyncIterator[bytes]


def is_stream(content: UploadContent) -> bool:
    return hasattr(content, "__aiter__")


def to_bytes(content: bytes | str, base64_encoded: bool) -> bytes:
    """
    Turn buffered upload content into the bytes to store.

    Args:
        content: Bytes or text
        base64_encoded: Whether content is base64 and must be decoded

    Returns:
        Raw bytes
    """
    if base64_encoded:
        return decode_base64(content)
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations (local filesystem, S3, etc.) must implement
    these methods so new backends can be added without touching callers.
    """

    @abstractmethod
    async def upload(
        self,
        key: str,
        content: UploadContent,
        base64_encoded: bool = True,
    ) -> str:
        """
        Persist content under key.

        Args:
            key: Storage key; missing parent directories/prefixes are created
            content: Bytes, text, or an async iterator yielding byte chunks.
                Iterators are streamed through to the medium.
            base64_encoded: Whether bytes/text content is base64 and must be
                decoded before storing. Ignored for streams.

        Returns:
            The stored key

        Raises:
            InvalidInputError: If base64 content cannot be decoded
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if an object exists at key.

        Returns:
            True if the object exists, False otherwise

        Raises:
            TransportError: On failures other than absence
        """
        pass

    @abstractmethod
    async def fetch_text(self, key: str) -> str:
        """
        Read the whole object as UTF-8 text.
        """
        pass

    @abstractmethod
    def fetch_stream(self, key: str) -> AsyncIterator[bytes]:
        """
        Return a lazy, single-pass async iterator over the object's bytes.

        Existence is not checked up front; the caller owns the iterator and
        should close it (``aclose()``) if it stops early.
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Delete the object at key, keeping the medium's own semantics for
        keys that do not exist.
        """
        pass

    @abstractmethod
    async def copy(self, source: str, dest: str) -> None:
        """
        Copy the object at source to dest.
        """
        pass

    @abstractmethod
    async def get_presigned_put_url(
        self,
        key: str,
        expires: int = DEFAULT_PRESIGNED_EXPIRES,
    ) -> str:
        """
        Get a URL an external client can PUT the object's bytes to.

        Args:
            key: Storage key the upload is scoped to
            expires: Validity window in seconds

        Returns:
            URL string
        """
        pass

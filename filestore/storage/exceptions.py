"""
Storage-specific exceptions.

These exceptions give callers one error taxonomy regardless of the backend
that is configured underneath the storage facade.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class InvalidInputError(StorageError):
    """Raised when content or a key passed to storage is malformed."""

    pass


class NotFoundError(StorageError):
    """Raised when a requested key is not present in storage."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"File {key} not found.")


class TransportError(StorageError):
    """
    Raised when the storage medium reports a failure other than absence.

    Attributes:
        status_code: HTTP-style status code reported by the medium, if any
        code: Medium-specific error code (e.g. "AccessDenied"), if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404 or self.code in ("404", "NoSuchKey", "NotFound")

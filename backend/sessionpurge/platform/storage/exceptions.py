"""Object storage exceptions.

All storage-related exceptions inherit from StorageException.
"""


class StorageException(Exception):
    """Base exception for storage operations."""

    pass


class StorageConnectionError(StorageException):
    """Raised when the storage endpoint cannot be reached."""

    pass


class StorageAuthenticationError(StorageException):
    """Raised when storage credentials are missing or rejected."""

    pass

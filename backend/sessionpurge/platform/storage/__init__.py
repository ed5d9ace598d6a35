"""Object storage for recorded session payloads."""

from sessionpurge.core.config import settings
from sessionpurge.platform.storage.backend import (
    FilesystemObjectStorage,
    ObjectStorage,
    S3ObjectStorage,
)
from sessionpurge.platform.storage.exceptions import (
    StorageAuthenticationError,
    StorageConnectionError,
    StorageException,
)
from sessionpurge.platform.storage.paths import StoragePaths, paths

__all__ = [
    "ObjectStorage",
    "FilesystemObjectStorage",
    "S3ObjectStorage",
    "get_object_storage",
    "StorageException",
    "StorageConnectionError",
    "StorageAuthenticationError",
    "StoragePaths",
    "paths",
]


def get_object_storage() -> ObjectStorage:
    """Factory function to get the object storage matching the environment."""
    if settings.ENVIRONMENT in ["local", "test"]:
        return FilesystemObjectStorage(base_path=settings.STORAGE_PATH)
    elif settings.ENVIRONMENT in ["dev", "prd"]:
        return S3ObjectStorage(
            bucket_name=settings.S3_SESSIONS_PAYLOAD_BUCKET_NAME,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
    else:
        raise ValueError(f"Unsupported environment for object storage: {settings.ENVIRONMENT}")

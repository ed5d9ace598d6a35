"""Object storage backends for recorded session payloads.

Provides a single abstract interface with Filesystem and S3 implementations.
All methods are async-first.

Usage:
    from sessionpurge.platform.storage import get_object_storage

    storage = get_object_storage()  # Auto-resolves based on ENVIRONMENT
    for key in await storage.list_objects("1/42/"):
        await storage.delete_object(key)
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import aioboto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from sessionpurge.core.logging import logger
from sessionpurge.platform.storage.exceptions import (
    StorageAuthenticationError,
    StorageConnectionError,
    StorageException,
)


class ObjectStorage(ABC):
    """Abstract object storage interface.

    Keys are relative strings (e.g., "dev/1/42/events-compressed-0").
    Both operations are idempotent: listing an empty prefix returns [] and
    deleting a missing key succeeds.
    """

    @abstractmethod
    async def list_objects(self, prefix: str) -> List[str]:
        """List every key under a prefix.

        Args:
            prefix: Key prefix

        Returns:
            Keys, sorted

        Raises:
            StorageException: If the listing fails
        """
        pass

    @abstractmethod
    async def delete_object(self, key: str) -> None:
        """Delete a single object.

        Args:
            key: Object key

        Raises:
            StorageException: If the delete fails
        """
        pass


class FilesystemObjectStorage(ObjectStorage):
    """Filesystem-based object storage.

    Used for local development and tests: keys map to files under base_path.
    """

    def __init__(self, base_path: Union[str, Path]):
        """Initialize filesystem storage.

        Args:
            base_path: Root directory for all keys
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"FilesystemObjectStorage initialized at {self.base_path}")

    def _resolve(self, key: str) -> Path:
        """Resolve relative key to absolute path."""
        normalized = key.replace("/", os.sep)
        return self.base_path / normalized

    async def list_objects(self, prefix: str) -> List[str]:
        """List all files whose key starts with prefix."""
        # Walk from the deepest complete directory of the prefix
        directory = prefix.rsplit("/", 1)[0] if "/" in prefix else ""
        base = self._resolve(directory) if directory else self.base_path
        if not base.is_dir():
            return []

        keys = []
        try:
            for item in base.rglob("*"):
                if item.is_file():
                    key = str(item.relative_to(self.base_path)).replace(os.sep, "/")
                    if key.startswith(prefix):
                        keys.append(key)
        except OSError as e:
            raise StorageException(f"Failed to list objects under {prefix}: {e}") from e

        return sorted(keys)

    async def delete_object(self, key: str) -> None:
        """Delete a file; a missing file is not an error."""
        try:
            self._resolve(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageException(f"Failed to delete {key}: {e}") from e


class S3ObjectStorage(ObjectStorage):
    """S3-compatible object storage.

    Supports AWS S3, MinIO, LocalStack, or any S3 API-compatible service.
    Uses path-style addressing.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-west-2",
        endpoint_url: Optional[str] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        """Initialize S3 storage.

        Args:
            bucket_name: Bucket holding the objects
            region: AWS region
            endpoint_url: Custom endpoint (None for AWS S3)
            session: aioboto3 session (credentials resolved by the default chain if None)
        """
        self.bucket_name = bucket_name
        self._region = region
        self._endpoint_url = endpoint_url
        self.session = session or aioboto3.Session()
        self._config = Config(s3={"addressing_style": "path"})

        logger.debug(
            f"S3ObjectStorage initialized: {bucket_name} "
            f"(endpoint: {endpoint_url or 'AWS S3'}, region: {region})"
        )

    def _client(self):
        return self.session.client(
            "s3",
            region_name=self._region,
            endpoint_url=self._endpoint_url,
            config=self._config,
        )

    def _wrap_error(self, action: str, e: Exception) -> StorageException:
        if isinstance(e, NoCredentialsError):
            return StorageAuthenticationError(f"S3 credentials not configured: {e}")
        if isinstance(
            e,
            (EndpointConnectionError, ConnectionClosedError, ConnectTimeoutError, ReadTimeoutError),
        ):
            return StorageConnectionError(f"Failed to reach S3 while {action}: {e}")
        if isinstance(e, ClientError):
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("403", "AccessDenied"):
                return StorageAuthenticationError(
                    f"Access denied to S3 bucket '{self.bucket_name}' while {action}"
                )
            return StorageException(f"S3 error while {action} ({error_code}): {e}")
        if isinstance(e, BotoCoreError):
            return StorageException(f"S3 client error while {action}: {e}")
        return StorageException(f"Unexpected error while {action}: {e}")

    async def list_objects(self, prefix: str) -> List[str]:
        """List all keys under prefix, following continuation tokens."""
        keys = []
        try:
            async with self._client() as s3:
                paginator = s3.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                    for obj in page.get("Contents", []):
                        keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            raise self._wrap_error(f"listing {prefix}", e) from e

        return sorted(keys)

    async def delete_object(self, key: str) -> None:
        """Delete a key. S3 answers 204 for missing keys too."""
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap_error(f"deleting {key}", e) from e

"""Session deletion pipeline: enumeration, per-store deletion workers and notification."""

from sessionpurge.platform.deletion.enumerator import SessionBatchEnumerator
from sessionpurge.platform.deletion.handlers import (
    SessionDeletionHandlers,
    create_session_deletion_handlers,
)
from sessionpurge.platform.deletion.index_worker import IndexDeletionWorker
from sessionpurge.platform.deletion.manifest import BatchManifestStore, ManifestStoreError
from sessionpurge.platform.deletion.notifier import DeletionNotifier
from sessionpurge.platform.deletion.postgres_worker import PostgresDeletionWorker
from sessionpurge.platform.deletion.storage_worker import StorageDeletionWorker

__all__ = [
    "BatchManifestStore",
    "DeletionNotifier",
    "IndexDeletionWorker",
    "ManifestStoreError",
    "PostgresDeletionWorker",
    "SessionBatchEnumerator",
    "SessionDeletionHandlers",
    "StorageDeletionWorker",
    "create_session_deletion_handlers",
]

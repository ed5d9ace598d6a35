"""Deletes a batch of sessions from object storage."""

from typing import Optional

from sessionpurge.core.config import settings
from sessionpurge.core.exceptions import DeletionStage, UpstreamReadError, UpstreamWriteError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.platform.deletion._base import BatchDeletionWorker
from sessionpurge.platform.deletion.manifest import BatchManifestStore
from sessionpurge.platform.storage import ObjectStorage, StorageException, paths
from sessionpurge.schemas import BatchIdResponse


class StorageDeletionWorker(BatchDeletionWorker):
    """Removes every object stored under each session's key prefix.

    Object keys are not tracked anywhere, so each session's prefix is listed
    and every listed key deleted. A prefix with no objects is simply skipped.
    """

    stage = DeletionStage.DELETE_STORAGE

    def __init__(
        self,
        storage: ObjectStorage,
        manifest_store: BatchManifestStore,
        dev_prefix: Optional[bool] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the worker.

        Args:
            storage: Object storage holding session payloads
            manifest_store: Source of truth for batch contents
            dev_prefix: Whether keys live under ``dev/`` (defaults to the environment)
            logger: Base logger
        """
        super().__init__(manifest_store, logger)
        self.storage = storage
        self.dev_prefix = settings.is_dev_or_test_env if dev_prefix is None else dev_prefix

    async def delete_batch(self, event: BatchIdResponse) -> BatchIdResponse:
        """List and delete the batch's objects (listing only in dry-run)."""
        log = self.batch_logger(event)
        session_ids = await self.resolve_session_ids(event)

        listed = 0
        deleted = 0
        for session_id in session_ids:
            prefix = paths.session_prefix(event.project_id, session_id, dev=self.dev_prefix)
            try:
                keys = await self.storage.list_objects(prefix)
            except StorageException as e:
                raise UpstreamReadError(
                    f"error listing objects under {prefix}: {e}", self.stage
                ) from e

            listed += len(keys)
            if event.dry_run:
                continue

            for key in keys:
                try:
                    await self.storage.delete_object(key)
                except StorageException as e:
                    raise UpstreamWriteError(f"error deleting object {key}: {e}", self.stage) from e
                deleted += 1

        if event.dry_run:
            log.info(f"Dry run: listed {listed} objects for {len(session_ids)} sessions")
        else:
            log.info(f"Deleted {deleted} objects for {len(session_ids)} sessions")
        return event

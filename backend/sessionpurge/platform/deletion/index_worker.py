"""Deletes a batch of sessions from the search index."""

from typing import Optional

from sessionpurge.core.exceptions import DeletionStage, UpstreamWriteError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.platform.deletion._base import BatchDeletionWorker
from sessionpurge.platform.deletion.manifest import BatchManifestStore
from sessionpurge.platform.index import SearchIndexError, SessionIndex
from sessionpurge.schemas import BatchIdResponse


class IndexDeletionWorker(BatchDeletionWorker):
    """Removes one index document per session id in the batch."""

    stage = DeletionStage.DELETE_INDEX

    def __init__(
        self,
        index: SessionIndex,
        manifest_store: BatchManifestStore,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the worker.

        Args:
            index: Session search index
            manifest_store: Source of truth for batch contents
            logger: Base logger
        """
        super().__init__(manifest_store, logger)
        self.index = index

    async def delete_batch(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete the batch's documents from the index (no-op in dry-run)."""
        log = self.batch_logger(event)
        session_ids = await self.resolve_session_ids(event)

        if event.dry_run:
            log.info(f"Dry run: skipping index delete of {len(session_ids)} sessions")
            return event

        for session_id in session_ids:
            try:
                await self.index.delete(session_id)
            except SearchIndexError as e:
                raise UpstreamWriteError(
                    f"error deleting session {session_id} from index: {e}", self.stage
                ) from e

        log.info(f"Deleted {len(session_ids)} sessions from index")
        return event

"""Base class for per-batch deletion workers."""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional

from sessionpurge.core.exceptions import DeletionStage, UpstreamReadError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger
from sessionpurge.platform.deletion.manifest import BatchManifestStore, ManifestStoreError
from sessionpurge.schemas import BatchIdResponse


class BatchDeletionWorker(ABC):
    """Deletes one batch of sessions from one store.

    Workers never trust ids passed inline: the session ids of a batch are
    re-resolved from the manifest store on every invocation. Any failure aborts
    the batch; what was already deleted stays deleted and a re-run finishes it.
    """

    stage: ClassVar[DeletionStage]

    def __init__(
        self,
        manifest_store: BatchManifestStore,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the worker.

        Args:
            manifest_store: Source of truth for batch contents
            logger: Base logger (batch dimensions are added per invocation)
        """
        self.manifest_store = manifest_store
        self._logger = logger or default_logger

    def batch_logger(self, event: BatchIdResponse) -> ContextualLogger:
        """Logger carrying the batch dimensions."""
        return self._logger.with_context(
            stage=self.stage.value,
            project_id=event.project_id,
            task_id=event.task_id,
            batch_id=event.batch_id,
            dry_run=event.dry_run,
        )

    async def resolve_session_ids(self, event: BatchIdResponse) -> List[int]:
        """Resolve the session ids of the batch from the manifest store.

        Raises:
            UpstreamReadError: If the manifest cannot be read
        """
        try:
            return await self.manifest_store.get_session_ids(event.task_id, event.batch_id)
        except ManifestStoreError as e:
            raise UpstreamReadError(
                f"error getting session ids to delete: {e}", self.stage
            ) from e

    @abstractmethod
    async def delete_batch(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete the batch from this worker's store.

        Args:
            event: Handle of the batch

        Returns:
            The same handle, so callers can chain and track progress
        """
        pass

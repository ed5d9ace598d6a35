"""Batch enumerator: turns a session query into persisted batch manifests.

The search index caps every response at a fixed page size, so the query is
walked with a search-after cursor over session ids sorted ascending. Each
non-empty page becomes one batch. An empty page is the only way the walk ends,
which makes a page of exactly ``page_size`` ids cost one extra (empty) request.
"""

import uuid
from typing import Callable, List, Optional

from sessionpurge.core.config import settings
from sessionpurge.core.exceptions import DeletionStage, UpstreamReadError, UpstreamWriteError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger
from sessionpurge.platform.deletion.manifest import BatchManifestStore, ManifestStoreError
from sessionpurge.platform.index import SearchIndexError, SessionIndex
from sessionpurge.schemas import BatchIdResponse, QuerySessionsInput


def _new_id() -> str:
    return str(uuid.uuid4())


class SessionBatchEnumerator:
    """Resolves a deletion request into batch manifests."""

    stage = DeletionStage.ENUMERATE

    def __init__(
        self,
        index: SessionIndex,
        manifest_store: BatchManifestStore,
        page_size: Optional[int] = None,
        id_factory: Callable[[], str] = _new_id,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the enumerator.

        Args:
            index: Session search index
            manifest_store: Where batch manifests are persisted
            page_size: Maximum ids per search page and per batch
            id_factory: Generator of task and batch ids
            logger: Base logger
        """
        self.index = index
        self.manifest_store = manifest_store
        self.page_size = settings.SEARCH_PAGE_SIZE if page_size is None else page_size
        self._new_id = id_factory
        self._logger = logger or default_logger

        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    async def enumerate(self, request: QuerySessionsInput) -> List[BatchIdResponse]:
        """Create one manifest per page of matching sessions.

        Batches persisted before a failure are kept: they are valid work and
        safe to delete later.

        Args:
            request: The deletion request

        Returns:
            One handle per persisted batch (empty if nothing matches)

        Raises:
            UpstreamReadError: If a search fails or the cursor does not advance
            UpstreamWriteError: If a manifest cannot be persisted
        """
        task_id = self._new_id()
        log = self._logger.with_context(
            stage=self.stage.value,
            project_id=request.project_id,
            task_id=task_id,
            dry_run=request.dry_run,
        )
        log.info(f"Enumerating sessions to delete (page size {self.page_size})")

        responses: List[BatchIdResponse] = []
        last_id: Optional[int] = None
        total = 0

        while True:
            try:
                session_ids = await self.index.search_ids(
                    request.project_id,
                    request.query,
                    max_results=self.page_size,
                    search_after=last_id,
                )
            except SearchIndexError as e:
                raise UpstreamReadError(f"error searching sessions: {e}", self.stage) from e

            if not session_ids:
                break

            self._check_page(session_ids, last_id)
            last_id = session_ids[-1]

            batch_id = self._new_id()
            try:
                await self.manifest_store.save_batch(task_id, batch_id, session_ids)
            except ManifestStoreError as e:
                raise UpstreamWriteError(
                    f"error saving DeleteSessionsTasks: {e}", self.stage
                ) from e

            responses.append(
                BatchIdResponse(
                    project_id=request.project_id,
                    task_id=task_id,
                    batch_id=batch_id,
                    dry_run=request.dry_run,
                )
            )
            total += len(session_ids)
            log.debug(f"Saved batch {batch_id} with {len(session_ids)} sessions")

        log.info(f"Enumerated {total} sessions into {len(responses)} batches")
        return responses

    def _check_page(self, session_ids: List[int], last_id: Optional[int]) -> None:
        """Ensure the page is strictly ascending and past the cursor.

        Anything else would repeat ids across batches or never terminate.
        """
        previous = last_id
        for session_id in session_ids:
            if previous is not None and session_id <= previous:
                raise UpstreamReadError(
                    f"search returned session {session_id} out of order after {previous}",
                    self.stage,
                )
            previous = session_id
        if len(session_ids) > self.page_size:
            raise UpstreamReadError(
                f"search returned {len(session_ids)} sessions for a page of {self.page_size}",
                self.stage,
            )

"""Entry points of the session deletion pipeline, one per stage.

Usage:
    handlers = await create_session_deletion_handlers()
    try:
        batches = await handlers.get_session_ids_by_query(request)
        for batch in batches:
            await handlers.delete_session_batch_from_index(batch)
            await handlers.delete_session_batch_from_postgres(batch)
            await handlers.delete_session_batch_from_storage(batch)
        await handlers.send_email(request)
    finally:
        await handlers.close()

Every stage is independent: the three deletion stages may run in any order,
concurrently across batches, and any number of times per batch.
"""

from typing import List, Optional

from sessionpurge.core.config import settings
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.core.logging import logger as default_logger
from sessionpurge.db.session import get_db_context
from sessionpurge.email import EmailClient
from sessionpurge.platform.deletion.enumerator import SessionBatchEnumerator
from sessionpurge.platform.deletion.index_worker import IndexDeletionWorker
from sessionpurge.platform.deletion.manifest import BatchManifestStore, DbContextFactory
from sessionpurge.platform.deletion.notifier import DeletionNotifier
from sessionpurge.platform.deletion.postgres_worker import PostgresDeletionWorker
from sessionpurge.platform.deletion.storage_worker import StorageDeletionWorker
from sessionpurge.platform.index import SessionIndex, VespaSessionIndex
from sessionpurge.platform.storage import ObjectStorage, get_object_storage
from sessionpurge.schemas import BatchIdResponse, QuerySessionsInput


class SessionDeletionHandlers:
    """Wires the enumerator, the three deletion workers and the notifier.

    All collaborators are injected so each can be replaced by a fake.
    """

    def __init__(
        self,
        index: SessionIndex,
        storage: ObjectStorage,
        email_client: EmailClient,
        manifest_store: Optional[BatchManifestStore] = None,
        db_context: DbContextFactory = get_db_context,
        page_size: Optional[int] = None,
        dev_storage_prefix: Optional[bool] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the handlers.

        Args:
            index: Session search index
            storage: Object storage holding session payloads
            email_client: Transactional email sender
            manifest_store: Batch manifest store (built on db_context if None)
            db_context: Factory of transactional database sessions
            page_size: Search page size, i.e. maximum batch size
            dev_storage_prefix: Whether object keys live under ``dev/``
            logger: Base logger
        """
        self.logger = logger or default_logger
        self.index = index
        self.manifest_store = manifest_store or BatchManifestStore(db_context)

        self.enumerator = SessionBatchEnumerator(
            index, self.manifest_store, page_size=page_size, logger=self.logger
        )
        self.index_worker = IndexDeletionWorker(index, self.manifest_store, logger=self.logger)
        self.postgres_worker = PostgresDeletionWorker(
            self.manifest_store, db_context=db_context, logger=self.logger
        )
        self.storage_worker = StorageDeletionWorker(
            storage, self.manifest_store, dev_prefix=dev_storage_prefix, logger=self.logger
        )
        self.notifier = DeletionNotifier(email_client, logger=self.logger)

    async def get_session_ids_by_query(self, event: QuerySessionsInput) -> List[BatchIdResponse]:
        """Resolve a deletion request into persisted batches."""
        return await self.enumerator.enumerate(event)

    async def delete_session_batch_from_index(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete one batch from the search index."""
        return await self.index_worker.delete_batch(event)

    async def delete_session_batch_from_postgres(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete one batch from Postgres."""
        return await self.postgres_worker.delete_batch(event)

    async def delete_session_batch_from_storage(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete one batch from object storage."""
        return await self.storage_worker.delete_batch(event)

    async def send_email(self, event: QuerySessionsInput) -> None:
        """Notify the requester that their sessions were deleted."""
        await self.notifier.notify(event)

    async def close(self) -> None:
        """Release the search index client."""
        await self.index.close_connection()


async def create_session_deletion_handlers(
    logger: Optional[ContextualLogger] = None,
) -> SessionDeletionHandlers:
    """Build handlers wired to the clients configured in settings.

    Args:
        logger: Base logger

    Returns:
        SessionDeletionHandlers using Vespa, the environment's object storage,
        Postgres and the Resend email API
    """
    logger = logger or default_logger
    index = await VespaSessionIndex.create(logger=logger)
    return SessionDeletionHandlers(
        index=index,
        storage=get_object_storage(),
        email_client=EmailClient(),
        page_size=settings.SEARCH_PAGE_SIZE,
        dev_storage_prefix=settings.is_dev_or_test_env,
        logger=logger,
    )

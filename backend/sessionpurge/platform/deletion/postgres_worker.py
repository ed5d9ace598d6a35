"""Deletes a batch of sessions from Postgres."""

from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from sessionpurge.core.exceptions import DeletionStage, UpstreamWriteError
from sessionpurge.core.logging import ContextualLogger
from sessionpurge.db.session import get_db_context
from sessionpurge.models import Session, SessionField
from sessionpurge.platform.deletion._base import BatchDeletionWorker
from sessionpurge.platform.deletion.manifest import BatchManifestStore, DbContextFactory
from sessionpurge.schemas import BatchIdResponse


class PostgresDeletionWorker(BatchDeletionWorker):
    """Removes session fields, then sessions, in one transaction.

    Deleting ids that are already gone matches zero rows and is not an error;
    no row count is enforced.
    """

    stage = DeletionStage.DELETE_POSTGRES

    def __init__(
        self,
        manifest_store: BatchManifestStore,
        db_context: DbContextFactory = get_db_context,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the worker.

        Args:
            manifest_store: Source of truth for batch contents
            db_context: Factory of transactional database sessions
            logger: Base logger
        """
        super().__init__(manifest_store, logger)
        self._db_context = db_context

    async def delete_batch(self, event: BatchIdResponse) -> BatchIdResponse:
        """Delete the batch's rows (no-op in dry-run)."""
        log = self.batch_logger(event)
        session_ids = await self.resolve_session_ids(event)

        if event.dry_run:
            log.info(f"Dry run: skipping Postgres delete of {len(session_ids)} sessions")
            return event

        if not session_ids:
            log.warning("Batch has no sessions, nothing to delete")
            return event

        deleted = {}
        try:
            async with self._db_context() as db:
                # session_fields reference sessions.id
                result = await db.execute(
                    delete(SessionField).where(SessionField.session_id.in_(session_ids))
                )
                deleted["session_fields"] = result.rowcount

                result = await db.execute(delete(Session).where(Session.id.in_(session_ids)))
                deleted["sessions"] = result.rowcount
        except SQLAlchemyError as e:
            raise UpstreamWriteError(f"error deleting sessions: {e}", self.stage) from e

        log.info(
            f"Deleted {deleted['sessions']} sessions and "
            f"{deleted['session_fields']} session fields for {len(session_ids)} ids"
        )
        return event

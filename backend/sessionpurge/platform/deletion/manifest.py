"""Batch manifest store.

The manifest store owns the (task, batch, session) rows. The enumerator is the
only writer; deletion workers only read. Rows are never updated or deleted.
"""

from typing import AsyncContextManager, Callable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sessionpurge import crud
from sessionpurge.db.session import get_db_context

DbContextFactory = Callable[[], AsyncContextManager[AsyncSession]]


class ManifestStoreError(Exception):
    """Raised when a manifest read or write fails."""

    pass


class BatchManifestStore:
    """Persists and resolves the session ids of deletion batches."""

    def __init__(self, db_context: DbContextFactory = get_db_context):
        """Initialize the manifest store.

        Args:
            db_context: Factory of transactional database sessions
        """
        self._db_context = db_context

    async def save_batch(self, task_id: str, batch_id: str, session_ids: Sequence[int]) -> None:
        """Persist one manifest row per session id in a single transaction.

        Raises:
            ManifestStoreError: If the insert fails
        """
        try:
            async with self._db_context() as db:
                await crud.delete_sessions_task.create_batch(
                    db, task_id=task_id, batch_id=batch_id, session_ids=session_ids
                )
        except SQLAlchemyError as e:
            raise ManifestStoreError(f"error saving batch {batch_id}: {e}") from e

    async def get_session_ids(self, task_id: str, batch_id: str) -> List[int]:
        """Resolve the session ids of a batch, ascending.

        Raises:
            ManifestStoreError: If the read fails
        """
        try:
            async with self._db_context() as db:
                return await crud.delete_sessions_task.get_session_ids_in_batch(
                    db, task_id=task_id, batch_id=batch_id
                )
        except SQLAlchemyError as e:
            raise ManifestStoreError(f"error reading batch {batch_id}: {e}") from e

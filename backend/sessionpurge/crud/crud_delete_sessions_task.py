"""CRUD operations for batch manifest rows."""

from typing import List, Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from sessionpurge.models.delete_sessions_task import DeleteSessionsTask


class CRUDDeleteSessionsTask:
    """CRUD operations for DeleteSessionsTask.

    Manifest rows are insert-only: there is no update or delete on purpose,
    the rows double as the audit trail of purged sessions.
    """

    def __init__(self):
        """Initialize the CRUD object."""
        self.model = DeleteSessionsTask

    async def create_batch(
        self,
        db: AsyncSession,
        task_id: str,
        batch_id: str,
        session_ids: Sequence[int],
    ) -> int:
        """Bulk insert one manifest row per session id.

        Args:
            db: Database session
            task_id: Task the batch belongs to
            batch_id: Batch identifier
            session_ids: Session ids assigned to the batch

        Returns:
            Number of rows inserted
        """
        if not session_ids:
            return 0

        await db.execute(
            insert(self.model),
            [
                {"session_id": session_id, "task_id": task_id, "batch_id": batch_id}
                for session_id in session_ids
            ],
        )
        return len(session_ids)

    async def get_session_ids_in_batch(
        self,
        db: AsyncSession,
        task_id: str,
        batch_id: str,
    ) -> List[int]:
        """Get the session ids of a batch, ascending.

        Args:
            db: Database session
            task_id: Task the batch belongs to
            batch_id: Batch identifier

        Returns:
            Session ids (empty if the batch is unknown)
        """
        result = await db.execute(
            select(self.model.session_id)
            .where(self.model.task_id == task_id, self.model.batch_id == batch_id)
            .order_by(self.model.session_id)
        )
        return list(result.scalars().all())


delete_sessions_task = CRUDDeleteSessionsTask()

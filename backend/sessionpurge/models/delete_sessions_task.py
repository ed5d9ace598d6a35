"""Batch manifest model.

One row per (task, batch, session). Rows are written once by the enumerator
and never updated or deleted; they are the audit trail of what was purged.
"""

from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from sessionpurge.models._base import Base, TimestampMixin


class DeleteSessionsTask(TimestampMixin, Base):
    """A session id assigned to a deletion batch."""

    __tablename__ = "delete_sessions_tasks"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    task_id: Mapped[str] = mapped_column(String(36), nullable=False)
    batch_id: Mapped[str] = mapped_column(String(36), nullable=False)

    __table_args__ = (Index("idx_delete_sessions_tasks_task_batch", "task_id", "batch_id"),)

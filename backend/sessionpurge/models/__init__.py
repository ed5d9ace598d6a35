"""Models for the session purge backend."""

from sessionpurge.models._base import Base
from sessionpurge.models.delete_sessions_task import DeleteSessionsTask
from sessionpurge.models.session import Session, SessionField

__all__ = [
    "Base",
    "DeleteSessionsTask",
    "Session",
    "SessionField",
]

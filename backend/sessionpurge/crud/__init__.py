"""CRUD objects."""

from sessionpurge.crud.crud_delete_sessions_task import delete_sessions_task

__all__ = ["delete_sessions_task"]

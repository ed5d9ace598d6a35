"""Schemas for the session purge backend."""

from sessionpurge.schemas.session_deletion import BatchIdResponse, QuerySessionsInput

__all__ = [
    "BatchIdResponse",
    "QuerySessionsInput",
]

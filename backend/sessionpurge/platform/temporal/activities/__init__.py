"""Temporal activities for the session purge pipeline."""

from sessionpurge.platform.temporal.activities.session_deletion import (
    delete_session_batch_from_index_activity,
    delete_session_batch_from_postgres_activity,
    delete_session_batch_from_storage_activity,
    get_session_ids_by_query_activity,
    send_email_activity,
)

__all__ = [
    "get_session_ids_by_query_activity",
    "delete_session_batch_from_index_activity",
    "delete_session_batch_from_postgres_activity",
    "delete_session_batch_from_storage_activity",
    "send_email_activity",
]

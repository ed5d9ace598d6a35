"""Temporal activities for the session deletion pipeline.

Each pipeline stage is one activity taking and returning plain dicts (the
camelCase wire form of the stage schemas). Retrying a failed stage is left to
the invoking workflow's retry policy.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Any, AsyncIterator, Awaitable, Dict, List, TypeVar

from temporalio import activity

from sessionpurge.core.logging import ContextualLogger, LoggerConfigurator

T = TypeVar("T")

HEARTBEAT_INTERVAL_SECONDS = 1


@asynccontextmanager
async def _session_deletion_handlers(logger: ContextualLogger) -> AsyncIterator[Any]:
    # Import here to avoid Temporal sandboxing issues
    from sessionpurge.platform.deletion import create_session_deletion_handlers

    handlers = await create_session_deletion_handlers(logger=logger)
    try:
        yield handlers
    finally:
        await handlers.close()


async def _run_with_heartbeat(work: Awaitable[T], message: str, logger: ContextualLogger) -> T:
    """Await ``work`` while heartbeating so cancellation reaches the activity."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=HEARTBEAT_INTERVAL_SECONDS)
            if task in done:
                return task.result()
            activity.heartbeat(message)
    except asyncio.CancelledError:
        logger.info(f"[ACTIVITY] Cancelled: {message}")
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        raise


def _activity_logger(**dimensions: Any) -> ContextualLogger:
    return LoggerConfigurator.configure_logger(
        "sessionpurge.temporal.activity", dimensions=dimensions
    )


@activity.defn
async def get_session_ids_by_query_activity(event: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Enumerate a deletion request into batch manifests.

    Args:
        event: QuerySessionsInput as dict

    Returns:
        BatchIdResponse dicts, one per batch
    """
    from sessionpurge.schemas import QuerySessionsInput

    request = QuerySessionsInput.model_validate(event)
    logger = _activity_logger(project_id=request.project_id, dry_run=request.dry_run)

    try:
        async with _session_deletion_handlers(logger) as handlers:
            batches = await _run_with_heartbeat(
                handlers.get_session_ids_by_query(request), "Enumerating sessions", logger
            )
    except Exception as e:
        logger.error(f"Failed to enumerate sessions for project {request.project_id}: {e}")
        raise

    return [batch.to_payload() for batch in batches]


async def _delete_batch(event: Dict[str, Any], handler_name: str, message: str) -> Dict[str, Any]:
    from sessionpurge.schemas import BatchIdResponse

    batch = BatchIdResponse.model_validate(event)
    logger = _activity_logger(
        project_id=batch.project_id,
        task_id=batch.task_id,
        batch_id=batch.batch_id,
        dry_run=batch.dry_run,
    )

    try:
        async with _session_deletion_handlers(logger) as handlers:
            result = await _run_with_heartbeat(
                getattr(handlers, handler_name)(batch), message, logger
            )
    except Exception as e:
        logger.error(f"Failed {handler_name} for batch {batch.batch_id}: {e}")
        raise

    return result.to_payload()


@activity.defn
async def delete_session_batch_from_index_activity(event: Dict[str, Any]) -> Dict[str, Any]:
    """Delete one batch from the search index.

    Args:
        event: BatchIdResponse as dict

    Returns:
        The same BatchIdResponse dict
    """
    return await _delete_batch(
        event, "delete_session_batch_from_index", "Deleting batch from index"
    )


@activity.defn
async def delete_session_batch_from_postgres_activity(event: Dict[str, Any]) -> Dict[str, Any]:
    """Delete one batch from Postgres."""
    return await _delete_batch(
        event, "delete_session_batch_from_postgres", "Deleting batch from Postgres"
    )


@activity.defn
async def delete_session_batch_from_storage_activity(event: Dict[str, Any]) -> Dict[str, Any]:
    """Delete one batch from object storage."""
    return await _delete_batch(
        event, "delete_session_batch_from_storage", "Deleting batch from object storage"
    )


@activity.defn
async def send_email_activity(event: Dict[str, Any]) -> None:
    """Send the deletion completion email.

    Args:
        event: QuerySessionsInput as dict (email, first name and session count)
    """
    from sessionpurge.schemas import QuerySessionsInput

    request = QuerySessionsInput.model_validate(event)
    logger = _activity_logger(project_id=request.project_id)

    try:
        async with _session_deletion_handlers(logger) as handlers:
            await handlers.send_email(request)
    except Exception as e:
        logger.error(f"Failed to send deletion email for project {request.project_id}: {e}")
        raise

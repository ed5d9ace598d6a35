"""Tests for the session deletion Temporal activities."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fakes import FakeDbContext, FakeManifestStore, FakeObjectStorage, FakeSessionIndex
from temporalio.testing import ActivityEnvironment

from sessionpurge.core.exceptions import UpstreamReadError
from sessionpurge.platform.deletion import SessionDeletionHandlers
from sessionpurge.platform.temporal.activities import (
    delete_session_batch_from_index_activity,
    delete_session_batch_from_postgres_activity,
    delete_session_batch_from_storage_activity,
    get_session_ids_by_query_activity,
    send_email_activity,
)
from sessionpurge.platform.temporal.activities import session_deletion
from sessionpurge.platform.temporal.worker import SESSION_DELETION_ACTIVITIES

HANDLERS_FACTORY = "sessionpurge.platform.deletion.create_session_deletion_handlers"


@pytest.fixture
def index():
    return FakeSessionIndex([1, 2, 3])


@pytest.fixture
def email_client():
    client = MagicMock()
    client.send = AsyncMock(return_value=200)
    return client


@pytest.fixture
def handlers(index, email_client):
    """Create handlers wired to in-memory collaborators."""
    db = AsyncMock()
    db.execute.return_value = MagicMock(rowcount=1)
    return SessionDeletionHandlers(
        index=index,
        storage=FakeObjectStorage(["dev/9/1/events-0"]),
        email_client=email_client,
        manifest_store=FakeManifestStore(),
        db_context=FakeDbContext(db),
        page_size=2,
        dev_storage_prefix=True,
    )


@pytest.fixture
def env():
    return ActivityEnvironment()


@pytest.mark.asyncio
async def test_enumeration_returns_camel_case_batches(env, handlers, index):
    with patch(HANDLERS_FACTORY, new=AsyncMock(return_value=handlers)):
        batches = await env.run(
            get_session_ids_by_query_activity, {"projectId": 9, "query": {}, "dryRun": False}
        )

    assert len(batches) == 2
    assert set(batches[0]) == {"projectId", "taskId", "batchId", "dryRun"}
    assert batches[0]["projectId"] == 9
    assert batches[0]["dryRun"] is False
    assert index.closed is True


@pytest.mark.asyncio
async def test_batch_activities_echo_the_batch(env, handlers, index):
    with patch(HANDLERS_FACTORY, new=AsyncMock(return_value=handlers)):
        batches = await env.run(
            get_session_ids_by_query_activity, {"projectId": 9, "dryRun": False}
        )

        for batch in batches:
            assert await env.run(delete_session_batch_from_index_activity, batch) == batch
            assert await env.run(delete_session_batch_from_postgres_activity, batch) == batch
            assert await env.run(delete_session_batch_from_storage_activity, batch) == batch

    assert index.documents == set()


@pytest.mark.asyncio
async def test_send_email_activity(env, handlers, email_client):
    with patch(HANDLERS_FACTORY, new=AsyncMock(return_value=handlers)):
        await env.run(
            send_email_activity,
            {"projectId": 9, "email": "ada@example.com", "firstName": "Ada", "sessionCount": 2},
        )

    assert email_client.send.call_args.kwargs["to"] == "ada@example.com"


@pytest.mark.asyncio
async def test_failure_is_reraised_and_handlers_closed(env, handlers, index):
    index.fail_search_on_call = 1

    with patch(HANDLERS_FACTORY, new=AsyncMock(return_value=handlers)):
        with pytest.raises(UpstreamReadError):
            await env.run(get_session_ids_by_query_activity, {"projectId": 9})

    assert index.closed is True


@pytest.mark.asyncio
async def test_invalid_payload_is_rejected(env):
    factory = AsyncMock()

    with patch(HANDLERS_FACTORY, new=factory):
        with pytest.raises(ValueError):
            await env.run(delete_session_batch_from_index_activity, {"projectId": 9})

    factory.assert_not_awaited()


@pytest.mark.asyncio
async def test_long_running_work_heartbeats(env):
    heartbeats = []
    env.on_heartbeat = lambda *details: heartbeats.append(details)

    async def work():
        await asyncio.sleep(0.05)
        return "done"

    async def run():
        return await session_deletion._run_with_heartbeat(work(), "Deleting", MagicMock())

    with patch.object(session_deletion, "HEARTBEAT_INTERVAL_SECONDS", 0.01):
        assert await env.run(run) == "done"

    assert heartbeats
    assert heartbeats[0] == ("Deleting",)


def test_worker_serves_every_stage():
    assert SESSION_DELETION_ACTIVITIES == [
        get_session_ids_by_query_activity,
        delete_session_batch_from_index_activity,
        delete_session_batch_from_postgres_activity,
        delete_session_batch_from_storage_activity,
        send_email_activity,
    ]

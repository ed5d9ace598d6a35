"""Tests for the per-store batch deletion workers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import FakeDbContext, FakeManifestStore, FakeObjectStorage, FakeSessionIndex
from sqlalchemy.exc import OperationalError

from sessionpurge.core.exceptions import DeletionStage, UpstreamReadError, UpstreamWriteError
from sessionpurge.platform.deletion import (
    IndexDeletionWorker,
    PostgresDeletionWorker,
    StorageDeletionWorker,
)
from sessionpurge.schemas import BatchIdResponse

SESSION_IDS = [10, 11, 12]


@pytest.fixture
def manifest_store():
    """Create a manifest store holding one batch of SESSION_IDS."""
    store = FakeManifestStore()
    store.rows = [
        {"task_id": "task-1", "batch_id": "batch-1", "session_id": session_id}
        for session_id in SESSION_IDS
    ]
    return store


def _batch(dry_run: bool = False, batch_id: str = "batch-1") -> BatchIdResponse:
    return BatchIdResponse(project_id=1, task_id="task-1", batch_id=batch_id, dry_run=dry_run)


class TestIndexDeletionWorker:
    """Tests for IndexDeletionWorker."""

    @pytest.fixture
    def index(self):
        return FakeSessionIndex([*SESSION_IDS, 99])

    @pytest.mark.asyncio
    async def test_deletes_every_session_of_the_batch(self, index, manifest_store):
        event = _batch()

        result = await IndexDeletionWorker(index, manifest_store).delete_batch(event)

        assert result == event
        assert index.deleted == SESSION_IDS
        assert index.documents == {99}

    @pytest.mark.asyncio
    async def test_dry_run_deletes_nothing(self, index, manifest_store):
        result = await IndexDeletionWorker(index, manifest_store).delete_batch(_batch(True))

        assert result.dry_run is True
        assert index.deleted == []

    @pytest.mark.asyncio
    async def test_rerun_is_harmless(self, index, manifest_store):
        worker = IndexDeletionWorker(index, manifest_store)

        await worker.delete_batch(_batch())
        await worker.delete_batch(_batch())

        assert index.documents == {99}

    @pytest.mark.asyncio
    async def test_unknown_batch_deletes_nothing(self, index, manifest_store):
        await IndexDeletionWorker(index, manifest_store).delete_batch(_batch(batch_id="other"))
        assert index.deleted == []

    @pytest.mark.asyncio
    async def test_delete_failure_aborts_after_earlier_ids(self, index, manifest_store):
        index.fail_delete_on = 11

        with pytest.raises(UpstreamWriteError, match="session 11") as exc_info:
            await IndexDeletionWorker(index, manifest_store).delete_batch(_batch())

        assert exc_info.value.stage is DeletionStage.DELETE_INDEX
        assert index.deleted == [10]

    @pytest.mark.asyncio
    async def test_manifest_failure_is_read_error(self, index, manifest_store):
        manifest_store.fail_read = True

        with pytest.raises(UpstreamReadError, match="error getting session ids to delete"):
            await IndexDeletionWorker(index, manifest_store).delete_batch(_batch())
        assert index.deleted == []


class TestPostgresDeletionWorker:
    """Tests for PostgresDeletionWorker."""

    @pytest.fixture
    def db(self):
        """Create a mock AsyncSession reporting row counts."""
        session = AsyncMock()
        session.execute.side_effect = [MagicMock(rowcount=7), MagicMock(rowcount=3)]
        return session

    @pytest.mark.asyncio
    async def test_deletes_fields_then_sessions_in_one_transaction(self, db, manifest_store):
        db_context = FakeDbContext(db)
        event = _batch()

        result = await PostgresDeletionWorker(manifest_store, db_context=db_context).delete_batch(
            event
        )

        assert result == event
        assert db_context.entered == 1
        statements = [str(call.args[0]) for call in db.execute.call_args_list]
        assert len(statements) == 2
        assert statements[0].startswith("DELETE FROM session_fields")
        assert "session_fields.session_id IN" in statements[0]
        assert statements[1].startswith("DELETE FROM sessions")
        assert "sessions.id IN" in statements[1]

    @pytest.mark.asyncio
    async def test_statements_bind_the_batch_ids(self, db, manifest_store):
        await PostgresDeletionWorker(
            manifest_store, db_context=FakeDbContext(db)
        ).delete_batch(_batch())

        for call in db.execute.call_args_list:
            params = call.args[0].compile().params
            assert list(params.values()) == [SESSION_IDS]

    @pytest.mark.asyncio
    async def test_dry_run_never_opens_a_transaction(self, db, manifest_store):
        db_context = FakeDbContext(db)

        await PostgresDeletionWorker(manifest_store, db_context=db_context).delete_batch(
            _batch(True)
        )

        assert db_context.entered == 0
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_batch_is_skipped(self, db, manifest_store):
        db_context = FakeDbContext(db)

        await PostgresDeletionWorker(manifest_store, db_context=db_context).delete_batch(
            _batch(batch_id="empty")
        )

        assert db_context.entered == 0

    @pytest.mark.asyncio
    async def test_rows_already_gone_is_not_an_error(self, manifest_store):
        db = AsyncMock()
        db.execute.return_value = MagicMock(rowcount=0)

        await PostgresDeletionWorker(manifest_store, db_context=FakeDbContext(db)).delete_batch(
            _batch()
        )

        assert db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_database_failure_is_write_error(self, manifest_store):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("DELETE", {}, Exception("connection lost"))

        with pytest.raises(UpstreamWriteError, match="error deleting sessions") as exc_info:
            await PostgresDeletionWorker(
                manifest_store, db_context=FakeDbContext(db)
            ).delete_batch(_batch())

        assert exc_info.value.stage is DeletionStage.DELETE_POSTGRES

    @pytest.mark.asyncio
    async def test_manifest_failure_is_read_error(self, db, manifest_store):
        manifest_store.fail_read = True

        with pytest.raises(UpstreamReadError):
            await PostgresDeletionWorker(
                manifest_store, db_context=FakeDbContext(db)
            ).delete_batch(_batch())


class TestStorageDeletionWorker:
    """Tests for StorageDeletionWorker."""

    @pytest.fixture
    def storage(self):
        return FakeObjectStorage(
            [
                "dev/1/10/events-0",
                "dev/1/10/events-1",
                "dev/1/12/resources-0",
                "dev/1/100/events-0",
                "1/10/events-0",
            ]
        )

    @pytest.mark.asyncio
    async def test_deletes_every_object_under_each_prefix(self, storage, manifest_store):
        event = _batch()

        result = await StorageDeletionWorker(storage, manifest_store, dev_prefix=True).delete_batch(
            event
        )

        assert result == event
        assert storage.listed_prefixes == ["dev/1/10/", "dev/1/11/", "dev/1/12/"]
        assert storage.deleted == ["dev/1/10/events-0", "dev/1/10/events-1", "dev/1/12/resources-0"]
        assert storage.keys == {"dev/1/100/events-0", "1/10/events-0"}

    @pytest.mark.asyncio
    async def test_production_keys_have_no_dev_prefix(self, storage, manifest_store):
        await StorageDeletionWorker(storage, manifest_store, dev_prefix=False).delete_batch(
            _batch()
        )

        assert storage.listed_prefixes == ["1/10/", "1/11/", "1/12/"]
        assert storage.deleted == ["1/10/events-0"]

    def test_dev_prefix_defaults_to_environment(self, storage, manifest_store):
        assert StorageDeletionWorker(storage, manifest_store).dev_prefix is True

    @pytest.mark.asyncio
    async def test_dry_run_lists_but_never_deletes(self, storage, manifest_store):
        await StorageDeletionWorker(storage, manifest_store, dev_prefix=True).delete_batch(
            _batch(True)
        )

        assert storage.listed_prefixes == ["dev/1/10/", "dev/1/11/", "dev/1/12/"]
        assert storage.deleted == []

    @pytest.mark.asyncio
    async def test_rerun_deletes_nothing_more(self, storage, manifest_store):
        worker = StorageDeletionWorker(storage, manifest_store, dev_prefix=True)

        await worker.delete_batch(_batch())
        storage.deleted.clear()
        await worker.delete_batch(_batch())

        assert storage.deleted == []

    @pytest.mark.asyncio
    async def test_listing_failure_is_read_error(self, storage, manifest_store):
        storage.fail_list_on = "dev/1/11/"

        with pytest.raises(UpstreamReadError, match="dev/1/11/") as exc_info:
            await StorageDeletionWorker(storage, manifest_store, dev_prefix=True).delete_batch(
                _batch()
            )

        assert exc_info.value.stage is DeletionStage.DELETE_STORAGE
        assert storage.deleted == ["dev/1/10/events-0", "dev/1/10/events-1"]

    @pytest.mark.asyncio
    async def test_delete_failure_is_write_error(self, storage, manifest_store):
        storage.fail_delete_on = "dev/1/10/events-1"

        with pytest.raises(UpstreamWriteError, match="dev/1/10/events-1"):
            await StorageDeletionWorker(storage, manifest_store, dev_prefix=True).delete_batch(
                _batch()
            )

        assert storage.deleted == ["dev/1/10/events-0"]

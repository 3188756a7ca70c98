import pytest

from jobbot.db.base import RecordStore
from jobbot.db.memory_store import MemoryJobStore, MemoryRecordStore
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord


@pytest.mark.asyncio
async def test_returned_records_are_independent_copies():
    store = MemoryRecordStore()
    await store.put("1", UserRecord(preferences=["Remote"]))

    record = await store.get("1")
    record.preferences.append("Contract")

    assert (await store.get("1")).preferences == ["Remote"]


@pytest.mark.asyncio
async def test_invalid_stored_document_reads_as_default():
    store = MemoryRecordStore({"1": {"preferences": "not-a-list"}})

    assert await store.get("1") == UserRecord()


@pytest.mark.asyncio
async def test_failed_write_uses_fallback_and_reports_false():
    class FlakyStore(RecordStore):
        backend = "flaky"

        def __init__(self):
            self.attempts = 0
            self.saved = {}

        async def _read(self, key):
            return self.saved.get(key)

        async def _write(self, key, document):
            self.attempts += 1
            if self.attempts == 1:
                raise OSError("disk full")
            self.saved[key] = document

    store = FlakyStore()
    saved = await store.put("1", UserRecord(state=UserState.READY, last_name="Lee"))

    assert saved is False
    assert store.attempts == 2
    assert (await store.get("1")).state == UserState.READY


@pytest.mark.asyncio
async def test_failing_read_returns_default():
    class BrokenStore(RecordStore):
        async def _read(self, key):
            raise OSError("unreadable")

        async def _write(self, key, document):
            raise OSError("unwritable")

    store = BrokenStore()

    assert await store.get("1") == UserRecord()
    assert await store.put("1", UserRecord()) is False


@pytest.mark.asyncio
async def test_memory_job_store():
    jobs = MemoryJobStore()
    await jobs.append_job({"id": 1})

    assert await jobs.list_jobs() == [{"id": 1}]

import asyncio
import json
import time

import pytest

from jobbot.db.json_store import JsonJobStore, JsonRecordStore
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "user_data.json", tmp_path / "jobs.json"


@pytest.mark.asyncio
async def test_initialize_creates_empty_documents(paths):
    users_path, jobs_path = paths
    await JsonRecordStore(str(users_path)).initialize()
    await JsonJobStore(str(jobs_path)).initialize()

    assert json.loads(users_path.read_text()) == {}
    assert json.loads(jobs_path.read_text()) == []


@pytest.mark.asyncio
async def test_initialize_fills_blank_files_and_keeps_data(paths):
    users_path, jobs_path = paths
    users_path.write_text("   \n")
    jobs_path.write_text('[{"title": "Engineer"}]')

    await JsonRecordStore(str(users_path)).initialize()
    await JsonJobStore(str(jobs_path)).initialize()

    assert json.loads(users_path.read_text()) == {}
    assert json.loads(jobs_path.read_text()) == [{"title": "Engineer"}]


@pytest.mark.asyncio
async def test_unknown_user_gets_default_record(paths):
    store = JsonRecordStore(str(paths[0]))
    await store.initialize()

    record = await store.get(7)

    assert record == UserRecord()
    assert record.state == UserState.NEW
    assert record.channels == [] and record.jobs == [] and record.preferences == []


@pytest.mark.asyncio
async def test_round_trip(paths):
    store = JsonRecordStore(str(paths[0]))
    await store.initialize()
    record = UserRecord(
        state=UserState.READY,
        first_name="Ann",
        last_name="Lee",
        preferences=["Remote", "Remote", "Contract"],
        channels=["news", "jobs"],
        jobs=[{"id": 1, "title": "Engineer"}],
    )

    assert await store.put(42, record) is True

    assert await JsonRecordStore(str(paths[0])).get("42") == record


@pytest.mark.asyncio
async def test_document_layout_matches_user_data_format(paths):
    store = JsonRecordStore(str(paths[0]))
    await store.initialize()
    await store.put(42, UserRecord(state=UserState.AWAITING_LAST_NAME, first_name="Ann"))

    data = json.loads(paths[0].read_text())
    assert data == {
        "42": {
            "state": "awaiting_last_name",
            "firstName": "Ann",
            "lastName": None,
            "preferences": [],
            "channels": [],
            "jobs": [],
        }
    }


@pytest.mark.asyncio
async def test_put_keeps_other_users(paths):
    store = JsonRecordStore(str(paths[0]))
    await store.initialize()
    await store.put(1, UserRecord(first_name="One"))
    await store.put(2, UserRecord(first_name="Two"))
    await store.put(1, UserRecord(first_name="Uno"))

    data = json.loads(paths[0].read_text())
    assert set(data) == {"1", "2"}
    assert data["1"]["firstName"] == "Uno"


@pytest.mark.asyncio
async def test_legacy_document_with_missing_keys(paths):
    paths[0].write_text(json.dumps({"5": {"state": "awaiting_preferences", "firstName": "Bo", "lastName": "Ng"}}))
    store = JsonRecordStore(str(paths[0]))

    record = await store.get(5)

    assert record.state == UserState.AWAITING_PREFERENCES
    assert record.preferences == []
    assert record.channels == []


@pytest.mark.asyncio
async def test_unknown_state_value_reads_as_new(paths):
    paths[0].write_text(json.dumps({"5": {"state": "something_else"}}))

    record = await JsonRecordStore(str(paths[0])).get(5)

    assert record.state == UserState.NEW


@pytest.mark.asyncio
async def test_corrupt_document_reads_as_default(paths):
    paths[0].write_text("{not json")
    store = JsonRecordStore(str(paths[0]))

    assert await store.get(1) == UserRecord()
    assert await store.check_health() is False


@pytest.mark.asyncio
async def test_put_on_corrupt_document_falls_back_to_single_record(paths):
    paths[0].write_text("{not json")
    store = JsonRecordStore(str(paths[0]))

    saved = await store.put(9, UserRecord(first_name="Nine"))

    assert saved is False
    data = json.loads(paths[0].read_text())
    assert list(data) == ["9"]
    assert data["9"]["firstName"] == "Nine"
    assert await store.check_health() is True


@pytest.mark.asyncio
async def test_wrong_top_level_type_is_treated_as_corrupt(paths):
    paths[0].write_text("[]")

    assert await JsonRecordStore(str(paths[0])).get(1) == UserRecord()


@pytest.mark.asyncio
async def test_jobs_append_and_list(paths):
    jobs = JsonJobStore(str(paths[1]))
    await jobs.initialize()

    assert await jobs.list_jobs() == []
    assert await jobs.append_job({"title": "Engineer"}) is True
    assert await jobs.append_job("opaque") is True

    assert await jobs.list_jobs() == [{"title": "Engineer"}, "opaque"]


@pytest.mark.asyncio
async def test_jobs_corrupt_document_lists_empty(paths):
    paths[1].write_text("{}")

    assert await JsonJobStore(str(paths[1])).list_jobs() == []


def slow_first_write(document, delay):
    original = document.write
    calls = []

    def write(data):
        calls.append(data)
        if len(calls) == 1:
            time.sleep(delay)
        original(data)

    document.write = write
    return calls


@pytest.mark.asyncio
async def test_timed_out_write_does_not_overwrite_later_put(paths):
    store = JsonRecordStore(str(paths[0]), timeout=0.2)
    await store.initialize()
    slow_first_write(store.document, 0.3)

    assert await store.put(1, UserRecord(first_name="Ann")) is False
    assert await store.put(2, UserRecord(first_name="Bob")) is True

    data = json.loads(paths[0].read_text())
    assert data["1"]["firstName"] == "Ann"
    assert data["2"]["firstName"] == "Bob"


@pytest.mark.asyncio
async def test_put_while_timed_out_write_still_running_reports_failure(paths):
    store = JsonRecordStore(str(paths[0]), timeout=0.1)
    await store.initialize()
    slow_first_write(store.document, 0.5)

    assert await store.put(1, UserRecord(first_name="Ann")) is False
    assert await store.put(2, UserRecord(first_name="Bob")) is False
    assert await store.check_health() is False

    await asyncio.sleep(0.5)

    assert await store.put(2, UserRecord(first_name="Bob")) is True
    data = json.loads(paths[0].read_text())
    assert data["1"]["firstName"] == "Ann"
    assert data["2"]["firstName"] == "Bob"


@pytest.mark.asyncio
async def test_timed_out_job_append_keeps_later_entries(paths):
    jobs = JsonJobStore(str(paths[1]), timeout=0.2)
    await jobs.initialize()
    slow_first_write(jobs.document, 0.3)

    assert await jobs.append_job("first") is False
    assert await jobs.append_job("second") is True

    assert await jobs.list_jobs() == ["first", "second"]

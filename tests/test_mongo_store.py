import asyncio

import pytest

from jobbot.db.mongo_store import MongoJobStore, MongoRecordStore
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction):
        self.documents = sorted(self.documents, key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return [{k: v for k, v in d.items() if k != "_id"} for d in self.documents]


class FakeCollection:
    """Just enough of a motor collection for the stores."""

    def __init__(self):
        self.documents = []
        self.delay = 0

    async def find_one(self, filter=None, projection=None, sort=None):
        await asyncio.sleep(self.delay)
        matches = [d for d in self.documents if all(d.get(k) == v for k, v in (filter or {}).items())]
        if sort:
            key, direction = sort[0]
            matches.sort(key=lambda d: d[key], reverse=direction < 0)
        if not matches:
            return None
        hidden = {k for k, v in (projection or {}).items() if v == 0}
        return {k: v for k, v in matches[0].items() if k not in hidden}

    async def replace_one(self, filter, replacement, upsert=False):
        self.documents = [d for d in self.documents if d.get("user_id") != filter["user_id"]]
        self.documents.append(dict(replacement))

    async def insert_one(self, document):
        self.documents.append(dict(document))

    def find(self, filter=None, projection=None):
        return FakeCursor(list(self.documents))


@pytest.mark.asyncio
async def test_record_round_trip():
    collection = FakeCollection()
    store = MongoRecordStore(collection=collection)
    record = UserRecord(state=UserState.READY, first_name="Ann", last_name="Lee", channels=["news"])

    assert await store.put(42, record) is True

    assert await store.get(42) == record
    assert collection.documents[0]["user_id"] == "42"
    assert collection.documents[0]["firstName"] == "Ann"


@pytest.mark.asyncio
async def test_put_replaces_whole_document():
    collection = FakeCollection()
    store = MongoRecordStore(collection=collection)
    await store.put("1", UserRecord(preferences=["Remote"]))
    await store.put("1", UserRecord())

    assert len(collection.documents) == 1
    assert (await store.get("1")).preferences == []


@pytest.mark.asyncio
async def test_slow_read_times_out_to_default():
    collection = FakeCollection()
    store = MongoRecordStore(collection=collection, timeout=0.01)
    await store.put("1", UserRecord(first_name="Ann"))
    collection.delay = 1

    assert await store.get("1") == UserRecord()


@pytest.mark.asyncio
async def test_jobs_are_listed_in_insertion_order():
    jobs = MongoJobStore(collection=FakeCollection())

    assert await jobs.append_job({"title": "First"}) is True
    assert await jobs.append_job({"title": "Second"}) is True

    assert await jobs.list_jobs() == [{"title": "First"}, {"title": "Second"}]

"""
jobbot/db/mongo_store.py

Purpose: MongoDB-backed stores

- One users document per user id, replaced whole on every put
- Jobs kept as {"seq": n, "entry": ...} documents in insertion order
- Every call bounded by the store timeout
"""

import asyncio
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from jobbot.core.exceptions import StorageTimeoutError
from jobbot.core.logging import get_logger
from jobbot.db.base import JobStore, RecordStore
from jobbot.db.indexes import create_indexes
from jobbot.db import mongo

logger = get_logger(__name__)


async def _bounded(awaitable, timeout: float, what: str):
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise StorageTimeoutError(f"MongoDB {what} timed out after {timeout}s") from e


class MongoRecordStore(RecordStore):
    backend = "mongo"
    
    def __init__(self, collection=None, timeout: float = 5.0):
        self._collection = collection
        self.timeout = timeout
    
    @property
    def collection(self):
        if self._collection is None:
            self._collection = mongo.get_users_collection()
        return self._collection
    
    async def initialize(self) -> None:
        await create_indexes()
    
    async def close(self) -> None:
        await mongo.close_mongo_connection()
    
    async def check_health(self) -> bool:
        return await mongo.check_database_health()
    
    async def _read(self, key: str) -> Optional[Dict[str, Any]]:
        return await _bounded(
            self.collection.find_one({"user_id": key}, {"_id": 0, "user_id": 0}),
            self.timeout,
            "read"
        )
    
    async def _write(self, key: str, document: Dict[str, Any]) -> None:
        await _bounded(
            self.collection.replace_one(
                {"user_id": key},
                {"user_id": key, **document},
                upsert=True
            ),
            self.timeout,
            "write"
        )


class MongoJobStore(JobStore):
    backend = "mongo"
    
    def __init__(self, collection=None, timeout: float = 5.0):
        self._collection = collection
        self.timeout = timeout
    
    @property
    def collection(self):
        if self._collection is None:
            self._collection = mongo.get_jobs_collection()
        return self._collection
    
    async def list_jobs(self) -> List[Any]:
        try:
            cursor = self.collection.find({}, {"_id": 0}).sort("seq", ASCENDING)
            documents = await _bounded(cursor.to_list(length=None), self.timeout, "job listing")
            return [document.get("entry") for document in documents]
        except Exception as e:
            logger.error(f"Error reading jobs: {e}", exc_info=True)
            return []
    
    async def append_job(self, entry: Any) -> bool:
        # seq collisions from concurrent appends are retried with the next number
        for _ in range(3):
            try:
                last = await _bounded(
                    self.collection.find_one({}, {"seq": 1}, sort=[("seq", DESCENDING)]),
                    self.timeout,
                    "job sequence lookup"
                )
                seq = (last or {}).get("seq", 0) + 1
                await _bounded(
                    self.collection.insert_one({"seq": seq, "entry": entry}),
                    self.timeout,
                    "job insert"
                )
                return True
            except DuplicateKeyError:
                continue
            except Exception as e:
                logger.error(f"Error saving job: {e}", exc_info=True)
                return False
        
        logger.error("Error saving job: sequence contention")
        return False

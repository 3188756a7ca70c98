"""
jobbot/db/factory.py

Purpose: Store selection

- Builds the record and job stores for the configured backend
- Connects/initializes them so both documents exist before the first event
"""

from typing import Optional, Tuple

from jobbot.core.config import Settings, settings
from jobbot.core.logging import get_logger
from jobbot.db.base import JobStore, RecordStore
from jobbot.db.json_store import JsonJobStore, JsonRecordStore
from jobbot.db.memory_store import MemoryJobStore, MemoryRecordStore

logger = get_logger(__name__)


def create_stores(config: Optional[Settings] = None) -> Tuple[RecordStore, JobStore]:
    """
    Instantiates the stores for config.STORAGE_BACKEND without touching storage.
    """
    config = config or settings
    backend = config.STORAGE_BACKEND
    
    if backend == "json":
        return (
            JsonRecordStore(config.USER_DATA_FILE, timeout=config.STORE_TIMEOUT),
            JsonJobStore(config.JOBS_FILE, timeout=config.STORE_TIMEOUT),
        )
    
    if backend == "mongo":
        from jobbot.db.mongo_store import MongoJobStore, MongoRecordStore
        
        return (
            MongoRecordStore(timeout=config.STORE_TIMEOUT),
            MongoJobStore(timeout=config.STORE_TIMEOUT),
        )
    
    if backend == "memory":
        return MemoryRecordStore(), MemoryJobStore()
    
    raise ValueError(f"Unknown storage backend: {backend}")


async def open_stores(config: Optional[Settings] = None) -> Tuple[RecordStore, JobStore]:
    """
    Creates the stores and prepares their backing storage.
    """
    config = config or settings
    
    if config.STORAGE_BACKEND == "mongo":
        from jobbot.db.mongo import connect_to_mongo
        
        await connect_to_mongo(config.MONGODB_URL, config.MONGODB_DB_NAME)
    
    record_store, job_store = create_stores(config)
    await record_store.initialize()
    await job_store.initialize()
    
    logger.info(f"✅ Stores ready (backend={config.STORAGE_BACKEND})")
    return record_store, job_store

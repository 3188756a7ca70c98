"""
jobbot/db/memory_store.py

Purpose: In-process stores

- Used by tests and for local runs without persistence
- Keeps serialized documents so reads never share objects with callers
"""

import copy
from typing import Any, Dict, List, Optional

from jobbot.db.base import JobStore, RecordStore


class MemoryRecordStore(RecordStore):
    backend = "memory"
    
    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None):
        self.documents: Dict[str, Dict[str, Any]] = copy.deepcopy(documents or {})
        self.writes = 0
    
    async def _read(self, key: str) -> Optional[Dict[str, Any]]:
        document = self.documents.get(key)
        return copy.deepcopy(document) if document is not None else None
    
    async def _write(self, key: str, document: Dict[str, Any]) -> None:
        self.documents[key] = copy.deepcopy(document)
        self.writes += 1


class MemoryJobStore(JobStore):
    backend = "memory"
    
    def __init__(self):
        self.jobs: List[Any] = []
    
    async def list_jobs(self) -> List[Any]:
        return copy.deepcopy(self.jobs)
    
    async def append_job(self, entry: Any) -> bool:
        self.jobs.append(copy.deepcopy(entry))
        return True

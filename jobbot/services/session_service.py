"""
jobbot/services/session_service.py

Purpose: Per-user serialization

- One asyncio.Lock per user id, created on demand
- Read-modify-write of a user's record never interleaves with another
  event from the same user
- Locks are discarded once nobody holds or waits for them
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict


class UserLockRegistry:
    """
    Lock table keyed by user id.
    
    Usage:
        async with registry.lock(user_id):
            record = await store.get(user_id)
            ...
            await store.put(user_id, record)
    """
    
    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}
    
    @asynccontextmanager
    async def lock(self, user_id: Any):
        key = str(user_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]
    
    def is_locked(self, user_id: Any) -> bool:
        lock = self._locks.get(str(user_id))
        return lock is not None and lock.locked()
    
    def __len__(self) -> int:
        return len(self._locks)

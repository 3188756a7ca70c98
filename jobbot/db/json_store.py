"""
jobbot/db/json_store.py

Purpose: JSON document storage

- user_data.json: {"<user id>": {record}, ...}
- jobs.json: [entry, ...]
- Files are created with an empty mapping/list when missing or blank
- Every record write rewrites the whole document (temp file + rename)
- Blocking file I/O runs in a worker thread with a bounded timeout
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from jobbot.core.exceptions import StorageError, StorageTimeoutError
from jobbot.core.logging import get_logger
from jobbot.db.base import JobStore, RecordStore

logger = get_logger(__name__)


class JsonDocument:
    """
    A single JSON file holding one top-level value of a fixed type.
    """
    
    def __init__(self, path: str, default_factory: Callable[[], Any]):
        self.path = Path(path)
        self.default_factory = default_factory
    
    def ensure_initialized(self) -> None:
        """
        Writes the default value if the file is missing or blank.
        """
        try:
            if not self.path.exists() or self.path.read_text(encoding="utf-8").strip() == "":
                self.write(self.default_factory())
                logger.info(f"Initialized {self.path}")
        except OSError as e:
            logger.error(f"Error initializing {self.path}: {e}")
            self.write(self.default_factory())
    
    def read(self) -> Any:
        """
        Loads the document.
        
        Raises:
            StorageError: If the file is unreadable, not JSON, or of the wrong type
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self.default_factory()
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        
        if not raw.strip():
            return self.default_factory()
        
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt JSON in {self.path}: {e}") from e
        
        expected = type(self.default_factory())
        if not isinstance(data, expected):
            raise StorageError(
                f"{self.path} holds {type(data).__name__}, expected {expected.__name__}"
            )
        
        return data
    
    def write(self, data: Any) -> None:
        """
        Replaces the document atomically (write temp file, then rename).
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


class SerialWriter:
    """
    Runs blocking writes to one document one at a time in a worker thread.
    
    A write that outlives its timeout keeps running in its thread; the next
    write waits for that thread to return before it reads the document, so
    a late thread can never overwrite a newer snapshot.
    """
    
    def __init__(self, path: Path, timeout: float):
        self.path = path
        self.timeout = timeout
        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Future] = None
    
    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()
    
    async def run(self, func: Callable[..., Any], *args) -> Any:
        async with self._lock:
            await self._settle()
            task = asyncio.ensure_future(asyncio.to_thread(func, *args))
            self._pending = task
            try:
                return await asyncio.wait_for(asyncio.shield(task), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                raise StorageTimeoutError(
                    f"{self.path} I/O timed out after {self.timeout}s"
                ) from e
            finally:
                if task.done():
                    self._pending = None
    
    async def _settle(self) -> None:
        """
        Waits for a timed out write that is still running in its thread.
        """
        pending = self._pending
        if pending is None:
            return
        try:
            await asyncio.wait_for(asyncio.shield(pending), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise StorageTimeoutError(
                f"{self.path} is still busy with an earlier write"
            ) from e
        except Exception as e:
            logger.error(f"Earlier timed out write to {self.path} failed: {e}")
        self._pending = None


class JsonRecordStore(RecordStore):
    """
    All user records in one JSON mapping.
    
    Writes go through a single SerialWriter because each put rewrites
    every user's record.
    """
    
    backend = "json"
    
    def __init__(self, path: str, timeout: float = 5.0):
        self.document = JsonDocument(path, dict)
        self.timeout = timeout
        self.writer = SerialWriter(self.document.path, timeout)
    
    async def initialize(self) -> None:
        await asyncio.to_thread(self.document.ensure_initialized)
    
    async def _read(self, key: str) -> Optional[Dict[str, Any]]:
        data = await self._run(self.document.read)
        return data.get(key)
    
    async def _write(self, key: str, document: Dict[str, Any]) -> None:
        await self.writer.run(self._replace_record, key, document)
    
    async def _write_fallback(self, key: str, document: Dict[str, Any], error: Exception) -> None:
        """
        Writes a document holding only this user's record.
        Used when the existing document cannot be read or rewritten; a timed
        out write may still be running, so timeouts are not retried.
        """
        if isinstance(error, StorageTimeoutError):
            raise error
        await self.writer.run(self.document.write, {key: document})
    
    async def check_health(self) -> bool:
        if self.writer.busy:
            logger.error(f"User data health check failed: {self.document.path} write still running")
            return False
        try:
            await self._run(self.document.read)
            return True
        except Exception as e:
            logger.error(f"User data health check failed: {e}")
            return False
    
    def _replace_record(self, key: str, document: Dict[str, Any]) -> None:
        data = self.document.read()
        data[key] = document
        self.document.write(data)
    
    async def _run(self, func, *args):
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise StorageTimeoutError(f"{self.document.path} I/O timed out after {self.timeout}s") from e


class JsonJobStore(JobStore):
    """
    Job entries as one JSON list.
    """
    
    backend = "json"
    
    def __init__(self, path: str, timeout: float = 5.0):
        self.document = JsonDocument(path, list)
        self.timeout = timeout
        self.writer = SerialWriter(self.document.path, timeout)
    
    async def initialize(self) -> None:
        await asyncio.to_thread(self.document.ensure_initialized)
    
    async def list_jobs(self) -> List[Any]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.document.read), timeout=self.timeout
            )
        except Exception as e:
            logger.error(f"Error reading jobs: {e}", exc_info=True)
            return []
    
    async def append_job(self, entry: Any) -> bool:
        try:
            await self.writer.run(self._append, entry)
            return True
        except Exception as e:
            logger.error(f"Error saving job: {e}", exc_info=True)
            return False
    
    def _append(self, entry: Any) -> None:
        jobs = self.document.read()
        jobs.append(entry)
        self.document.write(jobs)

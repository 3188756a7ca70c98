"""
jobbot/db/base.py

Purpose: Storage interfaces

- RecordStore: get/put of whole user records keyed by user id
- JobStore: append-only job list (reserved, not used by the dialogue)
- Shared failure policy: reads fall back to defaults, writes fall back
  to a best-effort minimal write; nothing raises to the caller
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from jobbot.core.logging import get_logger, LogContext
from jobbot.models.user import UserRecord

logger = get_logger(__name__)


class RecordStore(ABC):
    """
    Durable mapping from user id to UserRecord.
    
    Subclasses implement the raw document operations; this class applies
    the error policy so callers never see storage exceptions.
    """
    
    backend = "abstract"
    
    async def initialize(self) -> None:
        """Prepares the backing storage. Safe to call more than once."""
    
    async def close(self) -> None:
        """Releases backend resources."""
    
    async def get(self, user_id: Any) -> UserRecord:
        """
        Returns the stored record, or a fresh default record.
        
        Read failures and corrupt documents are logged and treated as
        "no record".
        """
        key = str(user_id)
        try:
            document = await self._read(key)
        except Exception as e:
            with LogContext(user_id=key):
                logger.error(f"Error reading user data ({self.backend}): {e}", exc_info=True)
            return UserRecord()
        
        try:
            return UserRecord.from_document(document)
        except Exception as e:
            with LogContext(user_id=key):
                logger.error(f"Stored user record is invalid, using defaults: {e}")
            return UserRecord()
    
    async def put(self, user_id: Any, record: UserRecord) -> bool:
        """
        Replaces the full record for a user.
        
        Returns:
            True if the primary write succeeded, False if only the fallback
            write was attempted
        """
        key = str(user_id)
        document = record.to_document()
        
        try:
            await self._write(key, document)
            return True
        except Exception as e:
            error = e
            with LogContext(user_id=key):
                logger.error(f"Error saving user data ({self.backend}): {e}", exc_info=True)
        
        try:
            await self._write_fallback(key, document, error)
            with LogContext(user_id=key):
                logger.warning("User data saved with fallback write")
        except Exception as e:
            with LogContext(user_id=key):
                logger.critical(f"Fallback save failed, record lost: {e}", exc_info=True)
        
        return False
    
    async def check_health(self) -> bool:
        return True
    
    @abstractmethod
    async def _read(self, key: str) -> Optional[Dict[str, Any]]:
        """Raw stored document for a key, or None."""
    
    @abstractmethod
    async def _write(self, key: str, document: Dict[str, Any]) -> None:
        """Persists a document for a key, raising on failure."""
    
    async def _write_fallback(self, key: str, document: Dict[str, Any], error: Exception) -> None:
        """Second, best-effort attempt after the primary write failed. Retries by default."""
        await self._write(key, document)


class JobStore(ABC):
    """
    Durable, append-only sequence of job entries.
    Entries are opaque; the onboarding dialogue never writes them.
    """
    
    backend = "abstract"
    
    async def initialize(self) -> None:
        """Prepares the backing storage. Safe to call more than once."""
    
    async def close(self) -> None:
        """Releases backend resources."""
    
    @abstractmethod
    async def list_jobs(self) -> List[Any]:
        """All job entries in insertion order; [] on read failure."""
    
    @abstractmethod
    async def append_job(self, entry: Any) -> bool:
        """Appends one entry. Returns False if it could not be stored."""

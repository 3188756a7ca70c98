"""
Storage initialization script

Creates the user/jobs documents (json backend) or the collections and
indexes (mongo backend) for the configured STORAGE_BACKEND:
    python scripts/init_storage.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from jobbot.core.config import settings
from jobbot.core.logging import setup_logging, get_logger
from jobbot.db.factory import open_stores

logger = get_logger(__name__)


async def main():
    setup_logging()
    logger.info(f"🔌 Initializing storage (backend={settings.STORAGE_BACKEND})")
    
    record_store, job_store = await open_stores()
    
    try:
        healthy = await record_store.check_health()
        jobs = await job_store.list_jobs()
        
        logger.info(f"✅ User store healthy: {healthy}")
        logger.info(f"✅ Jobs stored: {len(jobs)}")
        
        if settings.STORAGE_BACKEND == "json":
            logger.info(f"   User data: {settings.USER_DATA_FILE}")
            logger.info(f"   Jobs: {settings.JOBS_FILE}")
    finally:
        await record_store.close()
        await job_store.close()


if __name__ == "__main__":
    asyncio.run(main())

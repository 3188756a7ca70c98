"""
jobbot/db/indexes.py

Purpose: Database index management

- Unique index on users.user_id (one record per user)
- Ordered index for job listing
"""

from jobbot.db.mongo import get_users_collection, get_jobs_collection
from jobbot.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        jobs = get_jobs_collection()
        
        logger.info("Creating database indexes...")
        
        # Unique index on user_id (primary identifier)
        await users.create_index("user_id", unique=True, name="user_id_unique")
        logger.debug("Created unique index on users.user_id")
        
        # Index on state for onboarding funnel queries
        await users.create_index("state", name="state_idx")
        logger.debug("Created index on users.state")
        
        # Jobs are listed in insertion order
        await jobs.create_index("seq", unique=True, name="job_seq_unique")
        logger.debug("Created unique index on jobs.seq")
        
        logger.info("✅ All database indexes created successfully")
        
    except Exception as e:
        logger.error(f"Error creating indexes: {str(e)}", exc_info=True)
        raise

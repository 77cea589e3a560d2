"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Ensures fast lookups and data integrity
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import (
    get_users_collection,
    get_files_collection,
    get_merge_operations_collection
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        files = get_files_collection()
        merges = get_merge_operations_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        # ==============================================
        # FILES COLLECTION INDEXES
        # ==============================================

        # The stored name is the only key to the on-disk binary
        await files.create_index("stored_file_name", unique=True, name="stored_file_name_unique")
        logger.debug("Created unique index on files.stored_file_name")

        await files.create_index(
            [("user_id", ASCENDING), ("status", ASCENDING)],
            name="user_status_idx"
        )
        logger.debug("Created compound index on files.user_id + status")

        await files.create_index([("upload_timestamp", DESCENDING)], name="upload_timestamp_idx")
        logger.debug("Created index on files.upload_timestamp")

        # ==============================================
        # MERGE OPERATIONS COLLECTION INDEXES
        # ==============================================

        await merges.create_index(
            [("user_id", ASCENDING), ("status", ASCENDING)],
            name="merge_user_status_idx"
        )
        logger.debug("Created compound index on merge_operations.user_id + status")

        await merges.create_index([("created_at", DESCENDING)], name="merge_created_idx")
        logger.debug("Created index on merge_operations.created_at")

        logger.info("✅ All database indexes created successfully")

        user_indexes = await users.index_information()
        file_indexes = await files.index_information()
        merge_indexes = await merges.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Files={len(file_indexes)}, "
            f"MergeOperations={len(merge_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())

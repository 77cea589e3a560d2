"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Initializes Motor client with connection pooling
- Collections: users, files, merge_operations
- Health checks and retry logic
- Proper connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

USERS_COLLECTION = "users"
FILES_COLLECTION = "files"
MERGE_OPERATIONS_COLLECTION = "merge_operations"

# Global MongoDB client
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo():
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup.
    """
    global _client, _database

    if _database is not None:
        logger.warning("MongoDB database already initialized")
        return

    max_retries = 3
    retry_delay = 2

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            _client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                maxPoolSize=50,
                minPoolSize=5,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                retryWrites=True,
                retryReads=True,
            )

            _database = _client[settings.MONGODB_DB_NAME]

            # Verify connection
            await _client.admin.command("ping")

            logger.info(
                f"✅ Successfully connected to MongoDB: {settings.MONGODB_DB_NAME}"
            )
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )
            _client = None
            _database = None

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise ConnectionError("Could not establish MongoDB connection") from e


def set_database(database: Optional[AsyncIOMotorDatabase], client=None):
    """
    Installs an already-built database handle (tests, maintenance scripts).
    Passing None clears the current handle.
    """
    global _client, _database
    _database = database
    _client = client


async def close_mongo_connection():
    """
    Closes the MongoDB connection.
    Called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        logger.info("MongoDB connection closed")

    _client = None
    _database = None


async def check_database_health() -> bool:
    """
    Checks if the database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        if _database is None:
            logger.error("MongoDB database not initialized")
            return False

        await _database.command("ping")
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


async def get_database() -> AsyncIOMotorDatabase:
    """
    Returns the MongoDB database instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    return _require_database()


def _require_database() -> AsyncIOMotorDatabase:
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database


def get_users_collection():
    """
    Returns the users collection.

    Fields: full_name, email (unique, lowercase), password_hash, profile_image,
    account_status, subscription, created_at, updated_at, last_login
    """
    return _require_database()[USERS_COLLECTION]


def get_files_collection():
    """
    Returns the files collection.

    Fields: user_id, original_file_name, stored_file_name (unique), file_url,
    file_size, mime_type, upload_timestamp, status, metadata{page_count, width,
    height, version}, created_at, updated_at
    """
    return _require_database()[FILES_COLLECTION]


def get_merge_operations_collection():
    """
    Returns the merge_operations collection.

    Fields: user_id, operation_name, source_file_ids, merged_file_id,
    merge_configuration{file_order, total_pages, compression_level},
    annotations[], status, error_message, created_at, updated_at
    """
    return _require_database()[MERGE_OPERATIONS_COLLECTION]

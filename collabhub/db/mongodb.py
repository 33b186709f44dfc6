"""
MongoDB Connection Utility

MongoDB is the shared remote document store:
- projects      - one document per Project (_id = project id)
- applications  - one document per Application (_id = application id)

Every client reads the same collections, so separate processes converge here.
Live subscriptions use change streams, which need a replica set deployment.
"""
import logging

from pymongo import MongoClient, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from collabhub.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        timeout = settings.remote_timeout_ms
        _client = MongoClient(
            settings.mongodb_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=timeout,
            connectTimeoutMS=timeout,
            socketTimeoutMS=timeout,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the collabhub database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we use:
    - projects
    - applications
    """
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def close_mongo_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "projects": "projects",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes for the ordered reads and lookups.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Every read is ordered by createdAt descending
    db[COLLECTIONS["projects"]].create_index([("createdAt", DESCENDING)])
    db[COLLECTIONS["applications"]].create_index([("createdAt", DESCENDING)])

    # Lookups for "my projects", "applications for project", "my applications"
    db[COLLECTIONS["projects"]].create_index("authorId")
    db[COLLECTIONS["applications"]].create_index("projectId")
    db[COLLECTIONS["applications"]].create_index("userId")

    logger.info("MongoDB indexes created")

"""
MongoDB Connection Utility

MongoDB stores:
- Intake drafts (the multi-step form state, one per user)
- Raw uploaded documents (resume / company requirements as text)

WHY MongoDB for these?
- Schema-flexible: drafts change shape as steps are filled
- Document-oriented: each upload is self-contained
- No joins needed
"""
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the placify_docs database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_client(client: MongoClient) -> None:
    """Swap the client (used by tests and scripts)."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection by name."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "drafts": "intake_drafts",
    "raw_documents": "raw_documents",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # One draft per user
    db[COLLECTIONS["drafts"]].create_index("user_id", unique=True)

    logger.info("MongoDB indexes created")

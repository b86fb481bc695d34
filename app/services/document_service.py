"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. intake_drafts  - In-progress intake form state, one document per user
2. raw_documents  - Extracted text of uploaded resumes / company requirements
"""

from datetime import datetime
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection

from app.db.mongodb import get_collection, COLLECTIONS

DOCUMENT_KINDS = ("resume", "company_requirements")


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


# ============================================================
# RAW DOCUMENTS COLLECTION
# Stores uploaded file text before it is sent to the AI model
# ============================================================

class RawDocumentService:
    """
    Handles raw document storage.
    kind is "resume" or "company_requirements".
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["raw_documents"])

    def insert(self, user_id: int, kind: str, text: str, filename: str = None) -> str:
        """
        Insert a raw document.

        Returns:
            MongoDB ObjectId as string (referenced from the draft)
        """
        if kind not in DOCUMENT_KINDS:
            raise ValueError(f"Unknown document kind: {kind}")

        doc = {
            "user_id": user_id,
            "kind": kind,
            "text": text,
            "filename": filename,
            "uploaded_at": datetime.utcnow()
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def get_by_id(self, mongo_id: str, user_id: int = None) -> Optional[dict]:
        """Fetch a document by ObjectId, optionally scoped to its owner."""
        try:
            query = {"_id": ObjectId(mongo_id)}
        except (InvalidId, TypeError):
            return None
        if user_id is not None:
            query["user_id"] = user_id
        return serialize_doc(self.collection.find_one(query))

    def get_text(self, mongo_id: str, user_id: int = None) -> Optional[str]:
        doc = self.get_by_id(mongo_id, user_id)
        return doc["text"] if doc else None


# ============================================================
# INTAKE DRAFTS COLLECTION
# ============================================================

class DraftService:
    """
    Stores the intake form state.
    The draft dict shape is owned by app.services.intake_service.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["drafts"])

    def get(self, user_id: int) -> Optional[dict]:
        doc = self.collection.find_one({"user_id": user_id}, {"_id": 0})
        return doc

    def save(self, user_id: int, draft: dict) -> dict:
        """Upsert the whole draft and return what was stored."""
        draft = dict(draft)
        draft.pop("_id", None)
        draft["user_id"] = user_id
        draft["updated_at"] = datetime.utcnow()
        self.collection.replace_one({"user_id": user_id}, draft, upsert=True)
        return draft

    def delete(self, user_id: int) -> bool:
        result = self.collection.delete_one({"user_id": user_id})
        return result.deleted_count > 0

"""
MongoDB adapter for the portfolio content collections.
Wraps a pymongo client and exposes the small set of document operations the
resource repositories need.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
from urllib.parse import urlparse

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from .schemas import DOCUMENT_SCHEMAS, coerce_document

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "portfolioDB"


def database_name_from_uri(connection_string: str, default: str = DEFAULT_DB_NAME) -> str:
    """Extract the database name from the URI path, e.g. mongodb://host/portfolioDB"""
    path = urlparse(connection_string).path.lstrip("/")
    return path.split("/")[0] or default


def to_object_id(doc_id: Any) -> Optional[ObjectId]:
    """Parse a primary key, returning None for values that can never match a document."""
    if isinstance(doc_id, ObjectId):
        return doc_id
    try:
        return ObjectId(str(doc_id))
    except (InvalidId, TypeError):
        return None


class MongoAdapter:
    """MongoDB adapter for document-based database operations"""

    def __init__(
        self,
        connection_string: str,
        db_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
    ):
        self.connection_string = connection_string
        self.db_name = db_name or database_name_from_uri(connection_string)
        # pymongo connects lazily; the first operation surfaces an unreachable server
        self.client = client if client is not None else MongoClient(connection_string)
        self.db = self.client[self.db_name]
        logger.info("MongoAdapter configured for database: %s", self.db_name)

    def ping(self) -> bool:
        """Check that the server answers"""
        try:
            self.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.error("MongoDB ping failed: %s", e)
            return False

    def init_collections(self) -> None:
        """Create the createdAt indexes used for newest-first listing"""
        for collection_name in DOCUMENT_SCHEMAS:
            self.db[collection_name].create_index([("createdAt", DESCENDING)])
        logger.info("MongoDB collections and indexes initialized successfully")

    def create_document(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new document and return it as stored"""
        document = coerce_document(collection, fields)
        now = datetime.now(timezone.utc)
        document['createdAt'] = now
        document['updatedAt'] = now

        result = self.db[collection].insert_one(document)
        document['_id'] = result.inserted_id
        logger.info("Created document in %s with ID: %s", collection, result.inserted_id)
        return document

    def get_document(self, collection: str, doc_id: Any) -> Optional[Dict[str, Any]]:
        """Get a document by primary key"""
        object_id = to_object_id(doc_id)
        if object_id is None:
            return None
        return self.db[collection].find_one({"_id": object_id})

    def list_documents(self, collection: str) -> List[Dict[str, Any]]:
        """All documents, newest first"""
        cursor = self.db[collection].find().sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        return list(cursor)

    def update_document(self, collection: str, doc_id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Set the given fields on a document and return the updated document"""
        object_id = to_object_id(doc_id)
        if object_id is None:
            logger.warning("No document found to update in %s with ID: %s", collection, doc_id)
            return None

        changes = coerce_document(collection, fields)
        changes['updatedAt'] = datetime.now(timezone.utc)

        document = self.db[collection].find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            logger.warning("No document found to update in %s with ID: %s", collection, doc_id)
        else:
            logger.info("Updated document in %s with ID: %s", collection, doc_id)
        return document

    def delete_document(self, collection: str, doc_id: Any) -> Optional[Dict[str, Any]]:
        """Delete a document by primary key, returning what was removed"""
        object_id = to_object_id(doc_id)
        if object_id is None:
            logger.warning("No document found to delete in %s with ID: %s", collection, doc_id)
            return None

        document = self.db[collection].find_one_and_delete({"_id": object_id})
        if document is None:
            logger.warning("No document found to delete in %s with ID: %s", collection, doc_id)
        else:
            logger.info("Deleted document from %s with ID: %s", collection, doc_id)
        return document

    def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()

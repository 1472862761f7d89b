"""
Metadata store adapter.

Wraps the `documents` and `document_submissions` MongoDB collections.
Driver errors are translated into StoreFailure; nothing is retried here.
"""

import logging
from functools import wraps
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from ..errors import StoreFailure
from ..models import Document, DocumentFilters, DocumentSubmission

logger = logging.getLogger(__name__)

DOCUMENTS_COLLECTION = "documents"
SUBMISSIONS_COLLECTION = "document_submissions"

# Exclude Mongo's internal _id from every read
PROJECTION = {"_id": 0}
NEWEST_FIRST = [("created_at", DESCENDING)]

# DocumentFilters field -> document field
FILTER_FIELDS = {
    "grade_levels": "grade_level",
    "categories": "category",
    "exam_years": "exam_year",
    "exam_months": "exam_month",
}


def build_filter_query(filters: DocumentFilters) -> Dict[str, Any]:
    """
    Translate filters into a MongoDB query.

    Each constrained field becomes a set-membership clause ($in); clauses are
    combined with AND. Unconstrained fields do not appear in the query.
    """
    query = {}
    for name, values in filters.active().items():
        query[FILTER_FIELDS[name]] = {"$in": sorted(values)}
    return query


def _store_errors(operation: str):
    """Translate driver exceptions raised by a repository coroutine into StoreFailure."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as e:
                logger.error(f"Metadata store error during {operation}: {e}")
                raise StoreFailure(f"Failed to {operation}: {e}") from e

        return wrapper

    return decorator


class DocumentRepository:
    """CRUD and query access to the document catalog."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[DOCUMENTS_COLLECTION]

    @_store_errors("create document indexes")
    async def ensure_indexes(self):
        await self.collection.create_index("id", unique=True)
        await self.collection.create_index("created_at")
        await self.collection.create_index("category")
        await self.collection.create_index("subject")
        await self.collection.create_index([("grade_level", 1), ("exam_year", -1)])

    async def _find(self, query: Dict[str, Any]) -> List[Document]:
        cursor = self.collection.find(query, PROJECTION).sort(NEWEST_FIRST)
        rows = await cursor.to_list(length=None)
        return [Document(**row) for row in rows]

    @_store_errors("fetch documents")
    async def find_all(self) -> List[Document]:
        """All documents, newest first."""
        return await self._find({})

    @_store_errors("fetch document")
    async def find_by_id(self, document_id: str) -> Optional[Document]:
        row = await self.collection.find_one({"id": document_id}, PROJECTION)
        return Document(**row) if row else None

    @_store_errors("fetch documents by field")
    async def find_by_field(self, field: str, value: Any) -> List[Document]:
        """Exact-match lookup, newest first."""
        return await self._find({field: value})

    @_store_errors("fetch documents with filters")
    async def find_matching(self, filters: DocumentFilters) -> List[Document]:
        return await self._find(build_filter_query(filters))

    @_store_errors("fetch raw documents")
    async def find_raw(self, fields: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Rows exactly as stored, bypassing model normalization (used by the repair scan)."""
        projection = dict(PROJECTION)
        if fields:
            projection.update({field: 1 for field in ["id", *fields]})
        cursor = self.collection.find({}, projection)
        return await cursor.to_list(length=None)

    @_store_errors("upsert document")
    async def upsert(self, document: Document) -> Document:
        await self.collection.update_one(
            {"id": document.id},
            {"$set": document.model_dump()},
            upsert=True,
        )
        return document

    @_store_errors("update document")
    async def update_fields(self, document_id: str, fields: Dict[str, Any]) -> bool:
        result = await self.collection.update_one({"id": document_id}, {"$set": fields})
        return result.matched_count > 0

    @_store_errors("count documents")
    async def count(self) -> int:
        return await self.collection.count_documents({})

    @_store_errors("delete documents")
    async def delete_all(self) -> int:
        """Delete every document row. Returns number of deleted rows."""
        result = await self.collection.delete_many({})
        return result.deleted_count


class SubmissionRepository:
    """Access to user submissions against documents."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[SUBMISSIONS_COLLECTION]

    @_store_errors("create submission indexes")
    async def ensure_indexes(self):
        await self.collection.create_index("id", unique=True)
        await self.collection.create_index("document_id")
        await self.collection.create_index("user_id")

    @_store_errors("insert submission")
    async def insert(self, submission: DocumentSubmission) -> DocumentSubmission:
        await self.collection.insert_one(submission.model_dump())
        return submission

    @_store_errors("fetch submission")
    async def find_by_id(self, submission_id: str) -> Optional[DocumentSubmission]:
        row = await self.collection.find_one({"id": submission_id}, PROJECTION)
        return DocumentSubmission(**row) if row else None

    @_store_errors("update submission storage path")
    async def set_storage_path(self, submission_id: str, storage_path: str) -> bool:
        result = await self.collection.update_one(
            {"id": submission_id},
            {"$set": {"storage_path": storage_path}},
        )
        return result.matched_count > 0

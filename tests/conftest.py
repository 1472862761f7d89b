"""Shared fixtures: in-memory stand-ins for the Motor collections and the S3 store."""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from csat_catalog.errors import NotFoundError, StoreFailure
from csat_catalog.models import Document
from csat_catalog.storage import DocumentRepository, SubmissionRepository


def _matches(row, query):
    for field, condition in query.items():
        value = row.get(field)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


def _project(row, projection):
    if not projection:
        return copy.deepcopy(row)
    included = [field for field, flag in projection.items() if flag and field != "_id"]
    if included:
        result = {field: copy.deepcopy(row[field]) for field in included if field in row}
    else:
        result = copy.deepcopy(row)
    if projection.get("_id", 1) == 0:
        result.pop("_id", None)
    return result


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows

    def sort(self, keys):
        for field, direction in reversed(keys):
            self.rows.sort(key=lambda row: row.get(field), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self.rows if length is None else self.rows[:length]


class FakeCollection:
    """Implements the subset of the Motor collection API the repositories use."""

    def __init__(self):
        self.rows = []
        self.indexes = []
        self.update_calls = 0

    def find(self, query=None, projection=None):
        query = query or {}
        return FakeCursor([_project(row, projection) for row in self.rows if _matches(row, query)])

    async def find_one(self, query, projection=None):
        for row in self.rows:
            if _matches(row, query):
                return _project(row, projection)
        return None

    async def insert_one(self, row):
        row = copy.deepcopy(row)
        row.setdefault("_id", uuid.uuid4().hex)
        self.rows.append(row)
        return SimpleNamespace(inserted_id=row["_id"])

    async def update_one(self, query, update, upsert=False):
        self.update_calls += 1
        for row in self.rows:
            if _matches(row, query):
                row.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)
        if upsert:
            row = {**query, **copy.deepcopy(update["$set"]), "_id": uuid.uuid4().hex}
            self.rows.append(row)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=row["_id"])
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def delete_many(self, query):
        kept = [row for row in self.rows if not _matches(row, query)]
        deleted = len(self.rows) - len(kept)
        self.rows = kept
        return SimpleNamespace(deleted_count=deleted)

    async def count_documents(self, query):
        return sum(1 for row in self.rows if _matches(row, query))

    async def create_index(self, keys, **kwargs):
        self.indexes.append(keys)
        return str(keys)


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = FakeCollection()
        self[name] = collection
        return collection


class FakeObjectStore:
    """Dict-backed object store with the S3ObjectStore interface."""

    def __init__(self):
        self.objects = {}
        self.put_calls = []
        self.fail_on = set()

    def put(self, key, data, content_type="application/octet-stream", cache_control=None, metadata=None):
        if key in self.fail_on:
            raise StoreFailure(f"Upload failed for {key}")
        self.objects[key] = data
        self.put_calls.append(
            {"key": key, "content_type": content_type, "cache_control": cache_control, "metadata": metadata}
        )

    def get(self, key):
        if key not in self.objects:
            raise NotFoundError(f"Object not found: {key}")
        return self.objects[key]

    def exists(self, key):
        return key in self.objects

    def delete(self, key):
        self.objects.pop(key, None)

    def list_keys(self, prefix=""):
        return sorted(key for key in self.objects if key.startswith(prefix))

    def delete_many(self, keys):
        deleted = 0
        for key in keys:
            if self.objects.pop(key, None) is not None:
                deleted += 1
        return deleted


_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_document(n=0, **overrides):
    """Document factory; larger n means created later."""
    fields = {
        "id": f"doc-{n}",
        "title": "고3 국어 국어 수능 2024년 11월 평가원",
        "grade_level": "고3",
        "category": "국어",
        "subject": "국어",
        "selection": "",
        "exam_type": "수능",
        "exam_year": 2024,
        "exam_month": 11,
        "source": "평가원",
        "filename": f"file-{n}.pdf",
        "storage_path": f"documents/doc-{n}.pdf",
        "created_at": _BASE_TIME + timedelta(minutes=n),
    }
    fields.update(overrides)
    return Document(**fields)


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def repository(db):
    return DocumentRepository(db)


@pytest.fixture
def submission_repository(db):
    return SubmissionRepository(db)


@pytest.fixture
def documents_collection(db):
    return db["documents"]


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def seed(documents_collection):
    """Insert Documents directly into the fake collection."""

    def _seed(*documents):
        for document in documents:
            documents_collection.rows.append(document.model_dump())
        return documents

    return _seed

"""
Document catalog service - the read/query surface over the metadata store.

Every caller-supplied text value is normalized before it is compared, so a
decomposed '국어' finds rows stored as precomposed '국어'. Store failures
propagate as StoreFailure; nothing is retried here.
"""

import logging
from typing import List

from ..errors import NotFoundError
from ..models import AvailableFilters, Document, DocumentFilters
from ..storage.documents import DocumentRepository
from ..text import normalize, normalize_input

logger = logging.getLogger(__name__)


def _distinct(values) -> set:
    return {value for value in values if value not in (None, "")}


class DocumentCatalogService:
    """Listing, lookup, filtering and aggregate queries over documents."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository

    async def list_all(self) -> List[Document]:
        """All documents, newest first."""
        return await self.repository.find_all()

    async def get_by_id(self, document_id: str) -> Document:
        document = await self.repository.find_by_id(document_id)
        if document is None:
            raise NotFoundError(f"Document not found: {document_id}")
        return document

    async def get_by_category(self, category: str) -> List[Document]:
        return await self._get_by_field("category", category)

    async def get_by_subject(self, subject: str) -> List[Document]:
        return await self._get_by_field("subject", subject)

    async def _get_by_field(self, field: str, value: str) -> List[Document]:
        normalized = normalize_input(value)
        documents = await self.repository.find_by_field(field, normalized)
        logger.info(f"Lookup {field}='{normalized}' found {len(documents)} documents")
        if not documents:
            raise NotFoundError(f"No documents with {field} '{normalized}'")
        return documents

    async def get_filtered(self, filters: DocumentFilters) -> List[Document]:
        """
        Documents matching every constrained field of filters.

        AND across fields, OR within a field. An empty result is a valid outcome.
        """
        empty = [name for name, values in filters.active().items() if not values]
        if empty:
            logger.info(f"Filter with no usable values for {', '.join(empty)}; nothing can match")
            return []
        return await self.repository.find_matching(filters)

    async def get_available_filter_values(self) -> AvailableFilters:
        """
        Distinct values per filterable dimension, computed by a full scan.

        grade_levels/categories ascending, exam_years descending, exam_months ascending.
        """
        documents = await self.repository.find_all()

        return AvailableFilters(
            grade_levels=sorted(_distinct(normalize(d.grade_level) for d in documents)),
            categories=sorted(_distinct(normalize(d.category) for d in documents)),
            exam_years=sorted(_distinct(d.exam_year for d in documents), reverse=True),
            exam_months=sorted(_distinct(d.exam_month for d in documents)),
        )

    async def list_exam_types(self) -> List[str]:
        """Distinct exam types (수능, 모의고사, ...) in first-seen order."""
        documents = await self.repository.find_all()
        return list(dict.fromkeys(d.exam_type for d in documents if d.exam_type))

    async def list_subjects(self) -> List[str]:
        """Distinct subjects in first-seen order."""
        documents = await self.repository.find_all()
        return list(dict.fromkeys(d.subject for d in documents if d.subject))

"""Pydantic models for the exam catalog"""

from .exam import ExamMetadata
from .document import TEXT_FIELDS, Document, DocumentSubmission, SubmissionCreate
from .filters import AvailableFilters, DocumentFilters

__all__ = [
    "ExamMetadata",
    "TEXT_FIELDS",
    "Document",
    "DocumentSubmission",
    "SubmissionCreate",
    "DocumentFilters",
    "AvailableFilters",
]

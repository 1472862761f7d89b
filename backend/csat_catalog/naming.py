"""
Exam filename convention.

    {grade_level}_{category}_{subject}_{selection}_{exam_type}_{exam_year}_{exam_month}_{source}_{doc_type}.pdf

Examples:
    고3_국어_국어__수능_2024_11_평가원_problem.pdf        (empty selection slot)
    고3_국어_국어_수능_2024_11_평가원_problem.pdf         (selection omitted)
    고3_과학탐구_물리학 I_물리학 I_수능_2024_11_평가원_answer.pdf

The convention is a persisted contract: files that do not match it are
rejected by the upload pipeline.

Known limitation: in the 9-field layout a selection equal to an exam type
(e.g. a sub-track literally named "수능") cannot be told apart from
"no selection, exam type shifted into slot 3". The exam-type reading wins
and the trailing field is ignored.
"""

import logging
import re
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidFilenameError
from .models import ExamMetadata
from .text import normalize

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"
SEPARATOR = "_"

GRADE_LEVELS = ("고1", "고2", "고3")
CATEGORIES = ("국어", "수학", "영어", "한국사", "사회탐구", "과학탐구", "직업탐구", "제2외국어")
EXAM_TYPES = ("수능", "학력평가", "모의고사")
SOURCES = ("평가원", "교육청", "사설")
DOC_TYPES = ("problem", "answer", "explanation")

_VOCABULARIES = {
    "grade_level": GRADE_LEVELS,
    "category": CATEGORIES,
    "exam_type": EXAM_TYPES,
    "source": SOURCES,
    "doc_type": DOC_TYPES,
}

DOCUMENTS_PREFIX = "documents/"
EXAMS_PREFIX = "exams/"
THUMBNAILS_PREFIX = "thumbnails/"
SUBMISSIONS_PREFIX = "document_submissions/"

# ASCII digits only: 4-digit year, 1-2 digit month
_NUMBER_PATTERNS = {
    "exam_year": re.compile(r"[0-9]{4}"),
    "exam_month": re.compile(r"[0-9]{1,2}"),
}


def _split_fields(filename: str) -> List[str]:
    if not filename.endswith(PDF_SUFFIX):
        raise InvalidFilenameError(filename, "missing .pdf suffix")

    parts = filename[: -len(PDF_SUFFIX)].split(SEPARATOR)
    if len(parts) not in (8, 9):
        raise InvalidFilenameError(filename, f"expected 8 or 9 fields, got {len(parts)}")
    return [normalize(part) for part in parts]


def _assign_fields(parts: List[str]) -> dict:
    """Map split fields to names, resolving the optional selection slot."""
    grade_level, category, subject = parts[0], parts[1], parts[2]

    if len(parts) == 8:
        selection, rest = "", parts[3:]
    elif parts[3] == "":
        selection, rest = "", parts[4:]
    elif parts[3] in EXAM_TYPES:
        # exam type collided into the selection slot; trailing field is ignored
        selection, rest = "", parts[3:8]
    else:
        selection, rest = parts[3], parts[4:]

    exam_type, exam_year, exam_month, source, doc_type = rest
    return {
        "grade_level": grade_level,
        "category": category,
        "subject": subject,
        "selection": selection,
        "exam_type": exam_type,
        "exam_year": exam_year,
        "exam_month": exam_month,
        "source": source,
        "doc_type": doc_type,
    }


def _parse_int(filename: str, field: str, value: str) -> int:
    if not _NUMBER_PATTERNS[field].fullmatch(value):
        raise InvalidFilenameError(filename, f"{field} is not a valid number: '{value}'")
    return int(value)


def decode_filename(filename: str) -> ExamMetadata:
    """
    Decode a filename following the naming convention.

    Args:
        filename: Base name of the file, including the .pdf suffix

    Returns:
        ExamMetadata with every text field in canonical (NFC) form

    Raises:
        InvalidFilenameError: If any step fails. No partial result is produced.
    """
    fields = _assign_fields(_split_fields(filename))

    for field, vocabulary in _VOCABULARIES.items():
        if fields[field] not in vocabulary:
            raise InvalidFilenameError(filename, f"unknown {field}: '{fields[field]}'")

    fields["exam_year"] = _parse_int(filename, "exam_year", fields["exam_year"])
    fields["exam_month"] = _parse_int(filename, "exam_month", fields["exam_month"])

    try:
        return ExamMetadata(filename=filename, **fields)
    except PydanticValidationError as e:
        raise InvalidFilenameError(filename, str(e))


def parse_filename(filename: str) -> Optional[ExamMetadata]:
    """Decode a filename, returning None when it does not follow the convention."""
    try:
        return decode_filename(filename)
    except InvalidFilenameError as e:
        logger.debug(f"Unparseable filename {e.filename}: {e.reason}")
        return None


def build_filename(metadata: ExamMetadata) -> str:
    """Inverse of decode_filename. An empty selection is written as an empty slot."""
    parts = [
        metadata.grade_level,
        metadata.category,
        metadata.subject,
        metadata.selection or "",
        metadata.exam_type,
        str(metadata.exam_year),
        str(metadata.exam_month),
        metadata.source,
        metadata.doc_type,
    ]
    return SEPARATOR.join(parts) + PDF_SUFFIX


def build_title(metadata: ExamMetadata) -> str:
    """Human-readable title, e.g. '고3 국어 국어 수능 2024년 11월 평가원'."""
    selection_text = f" {metadata.selection}" if metadata.selection else ""
    return (
        f"{metadata.grade_level} {metadata.category} {metadata.subject}{selection_text} "
        f"{metadata.exam_type} {metadata.exam_year}년 {metadata.exam_month}월 {metadata.source}"
    )


def build_exam_path(metadata: ExamMetadata) -> str:
    """Object key derived from the metadata fields (the 'metadata' storage layout)."""
    selection_path = f"/{metadata.selection}" if metadata.selection else ""
    return (
        f"{EXAMS_PREFIX}{metadata.grade_level}/{metadata.category}/{metadata.subject}{selection_path}/"
        f"{metadata.exam_year}/{metadata.exam_month}/{metadata.source}/{metadata.doc_type}.pdf"
    )


def document_storage_path(document_id: str) -> str:
    return f"{DOCUMENTS_PREFIX}{document_id}.pdf"


def thumbnail_path(document_id: str) -> str:
    return f"{THUMBNAILS_PREFIX}{document_id}.png"


def submission_storage_path(submission_id: str) -> str:
    return f"{SUBMISSIONS_PREFIX}{submission_id}.pdf"

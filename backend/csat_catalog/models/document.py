"""Document catalog Pydantic models."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..text import normalize

TEXT_FIELDS = ("title", "subject", "category", "exam_type", "selection", "grade_level", "source")


class Document(BaseModel):
    """One row per exam artifact (problem, answer or explanation PDF)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    grade_level: str
    category: str
    subject: str
    selection: str = ""
    exam_type: str
    exam_year: int
    exam_month: int
    source: str = ""
    filename: str
    storage_path: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correct_answers: Dict[str, Any] = Field(default_factory=dict)
    question_scores: Dict[str, Any] = Field(default_factory=dict)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _canonical_text(cls, value):
        # legacy rows may carry null selection/source
        if value is None:
            return ""
        return normalize(value)

    @field_validator("correct_answers", "question_scores", mode="before")
    @classmethod
    def _empty_payload(cls, value):
        return value or {}


class DocumentSubmission(BaseModel):
    """One row per user attempt against a Document."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    document_id: str
    storage_path: str = ""
    user_answers: Dict[str, Any] = Field(default_factory=dict)
    score: Optional[float] = None
    incorrect_questions: List[int] = []
    unanswered_questions: List[int] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SubmissionCreate(BaseModel):
    """Input for the submission upload script."""

    user_id: str
    document_id: str
    user_answers: Dict[str, Any] = Field(default_factory=dict)
    score: Optional[float] = None
    incorrect_questions: List[int] = []
    unanswered_questions: List[int] = []
    file_path: Optional[str] = None

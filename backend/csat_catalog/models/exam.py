"""Metadata decoded from an exam filename."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..text import normalize


class ExamMetadata(BaseModel):
    """The nine logical fields of the naming convention plus the original filename."""

    model_config = ConfigDict(frozen=True)

    grade_level: str
    category: str
    subject: str
    selection: str = ""  # empty when the category has no sub-track
    exam_type: str
    exam_year: int = Field(ge=1000, le=9999)
    exam_month: int = Field(ge=0, le=99)
    source: str
    doc_type: str
    filename: str = ""

    @field_validator(
        "grade_level", "category", "subject", "selection", "exam_type", "source", "doc_type",
        mode="before",
    )
    @classmethod
    def _canonical_text(cls, value):
        return normalize(value)

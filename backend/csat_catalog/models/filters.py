"""Filter input and aggregate output of the catalog query surface."""

from typing import List, Optional, Set

from pydantic import BaseModel, field_validator

from ..text import normalize_input


class DocumentFilters(BaseModel):
    """
    AND across fields, OR within a field.

    None leaves a field unconstrained. A set, even an empty one, constrains it:
    an empty set matches no document.
    """

    grade_levels: Optional[Set[str]] = None
    categories: Optional[Set[str]] = None
    exam_years: Optional[Set[int]] = None
    exam_months: Optional[Set[int]] = None

    @field_validator("grade_levels", "categories", mode="after")
    @classmethod
    def _canonical_values(cls, values):
        if values is None:
            return None
        return {normalize_input(v) for v in values if v and v.strip()}

    def active(self) -> dict:
        """Fields that constrain the result, keyed by field name."""
        return {
            name: values
            for name, values in (
                ("grade_levels", self.grade_levels),
                ("categories", self.categories),
                ("exam_years", self.exam_years),
                ("exam_months", self.exam_months),
            )
            if values is not None
        }


class AvailableFilters(BaseModel):
    grade_levels: List[str] = []
    categories: List[str] = []
    exam_years: List[int] = []
    exam_months: List[int] = []

"""Utility functions for the exam catalog."""

import logging
import re
from typing import List, Optional, Set, Tuple

from ..errors import ValidationError
from ..text import normalize_input

logger = logging.getLogger(__name__)

DIGITS = re.compile(r"[0-9]+")


def validate_file_size(file_bytes: bytes, max_size_mb: int) -> Tuple[bool, str]:
    """Validate file size in MB."""
    file_size_mb = len(file_bytes) / (1024 * 1024)

    if file_size_mb > max_size_mb:
        return False, f"File size {file_size_mb:.1f} MB exceeds limit of {max_size_mb} MB"

    if not file_bytes:
        return False, "File is empty"

    return True, "OK"


def _entries(raw: Optional[str]) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()] if raw else []


def parse_text_set(raw: Optional[str]) -> Optional[Set[str]]:
    """
    Decode a comma-separated query parameter into a set of canonical strings.

    "고3, 고2" -> {"고3", "고2"}. Blank entries are dropped; a missing or
    blank parameter returns None (unconstrained).
    """
    entries = _entries(raw)
    if not entries:
        return None
    return {normalize_input(entry) for entry in entries}


def parse_int_set(raw: Optional[str], name: str, strict: bool = False) -> Optional[Set[int]]:
    """
    Decode a comma-separated query parameter into a set of non-negative integers.

    Only ASCII digits are accepted ("2_024", "-3" and full-width digits are
    not). Unparseable entries are dropped with a warning, or rejected with
    ValidationError when strict is set. A missing or blank parameter returns
    None (unconstrained); a parameter whose every entry was dropped returns an
    empty set, which matches nothing.
    """
    entries = _entries(raw)
    if not entries:
        return None

    values = set()
    for entry in entries:
        if DIGITS.fullmatch(entry):
            values.add(int(entry))
            continue
        if strict:
            raise ValidationError(f"{name}: '{entry}' is not an integer")
        logger.warning(f"Dropping unparseable {name} value: '{entry}'")
    return values

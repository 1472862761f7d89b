"""
Unicode normalization for Korean text.

Hangul can be stored precomposed (NFC, '국' = U+AC6D) or decomposed into
jamo (NFD, U+1100 U+116E U+11A8). Both render identically but compare
unequal, so every value that is compared or persisted goes through
normalize() first: filename fields, filter and lookup parameters, model
fields, and the repair scan.
"""

import unicodedata
from typing import Any, Dict, Iterable

CANONICAL_FORM = "NFC"


def normalize(text: Any) -> Any:
    """Return the precomposed (NFC) form of text.

    Non-string and empty input is returned unchanged.
    """
    if not isinstance(text, str) or not text:
        return text
    return unicodedata.normalize(CANONICAL_FORM, text)


def normalize_input(text: Any) -> Any:
    """Normalize a caller-supplied value: strip surrounding whitespace, then NFC."""
    if not isinstance(text, str) or not text:
        return text
    return normalize(text.strip())


def needs_normalization(text: Any) -> bool:
    """True iff normalize(text) differs from text."""
    if not isinstance(text, str) or not text:
        return False
    return not unicodedata.is_normalized(CANONICAL_FORM, text)


def normalize_fields(record: Dict[str, Any], fields: Iterable[str]) -> Dict[str, str]:
    """Return {field: canonical value} for the fields of record that are not canonical."""
    updates = {}
    for field in fields:
        value = record.get(field)
        if needs_normalization(value):
            updates[field] = normalize(value)
    return updates

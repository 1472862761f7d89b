"""
Normalization repair for rows written before input normalization existed.

Rows are read raw (bypassing the model validators) so that decomposed
Hangul is visible, then rewritten field-by-field in canonical form. Each
row is updated independently; re-running after an interruption only touches
rows that are still non-canonical, and a run over a clean catalog writes
nothing.
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel

from ..errors import CatalogError
from ..models.document import TEXT_FIELDS
from ..storage.documents import DocumentRepository
from ..text import normalize, normalize_fields
from .renaming import SUBJECT_CATEGORIES

logger = logging.getLogger(__name__)


class RepairReport(BaseModel):
    checked: int = 0
    with_issues: int = 0
    fixed: int = 0
    failed: int = 0


class NormalizationIssue(BaseModel):
    id: str
    field: str
    stored: str
    canonical: str


def find_issues(row: Dict[str, Any]) -> List[NormalizationIssue]:
    """Non-canonical text fields of one raw row."""
    issues = []
    for field, canonical in normalize_fields(row, TEXT_FIELDS).items():
        issues.append(
            NormalizationIssue(id=str(row.get("id")), field=field, stored=row[field], canonical=canonical)
        )
    return issues


class NormalizationRepairService:
    """Rewrites non-canonical text fields of stored documents."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository

    async def scan(self, limit: int = 5) -> List[NormalizationIssue]:
        """Return up to limit issues without modifying anything."""
        rows = await self.repository.find_raw(list(TEXT_FIELDS))
        issues = []
        for row in rows:
            issues.extend(find_issues(row))
            if len(issues) >= limit:
                break

        logger.info(f"Scanned {len(rows)} documents, showing {min(len(issues), limit)} issues")
        return issues[:limit]

    async def fix(self) -> RepairReport:
        """Rewrite every non-canonical field in place."""
        rows = await self.repository.find_raw(list(TEXT_FIELDS))
        report = RepairReport(checked=len(rows))
        logger.info(f"Checking {len(rows)} documents for non-canonical text")

        for row in rows:
            updates = normalize_fields(row, TEXT_FIELDS)
            if not updates:
                continue

            report.with_issues += 1
            document_id = row.get("id")
            try:
                if await self.repository.update_fields(document_id, updates):
                    report.fixed += 1
                    logger.info(f"✅ Fixed document {document_id}: {', '.join(sorted(updates))}")
                else:
                    report.failed += 1
                    logger.warning(f"⚠️  Document {document_id} disappeared before it could be fixed")
            except CatalogError as e:
                report.failed += 1
                logger.error(f"❌ Failed to fix document {document_id}: {e}")

        logger.info(
            f"📊 Repair: {report.checked} checked, {report.with_issues} with issues, "
            f"{report.fixed} fixed, {report.failed} failed"
        )
        return report

    async def repair_categories(self) -> RepairReport:
        """
        Reassign category from subject for known subjects.

        Only rows whose stored category disagrees with the subject's category
        are rewritten. Unknown subjects are left untouched.
        """
        rows = await self.repository.find_raw(["subject", "category"])
        report = RepairReport(checked=len(rows))

        for row in rows:
            subject = normalize(row.get("subject"))
            expected = SUBJECT_CATEGORIES.get(subject)
            if expected is None or row.get("category") == expected:
                continue

            report.with_issues += 1
            document_id = row.get("id")
            try:
                if await self.repository.update_fields(document_id, {"category": expected}):
                    report.fixed += 1
                    logger.info(f"✅ {subject}: {row.get('category')} -> {expected} ({document_id})")
                else:
                    report.failed += 1
            except CatalogError as e:
                report.failed += 1
                logger.error(f"❌ Failed to update category for {document_id}: {e}")

        logger.info(f"📊 Category repair: {report.fixed}/{report.with_issues} updated")
        return report

"""
Catalog cleanup - wipes every document row and every exam blob.

Destructive; refuses to run unless explicitly confirmed.
"""

import asyncio
import logging
from typing import Dict, Iterable

from pydantic import BaseModel

from ..errors import ValidationError
from ..naming import DOCUMENTS_PREFIX, EXAMS_PREFIX, THUMBNAILS_PREFIX
from ..storage.documents import DocumentRepository
from ..storage.objects import S3ObjectStore

logger = logging.getLogger(__name__)

CLEANUP_PREFIXES = (EXAMS_PREFIX, DOCUMENTS_PREFIX, THUMBNAILS_PREFIX)


class CleanupReport(BaseModel):
    rows_deleted: int = 0
    objects_deleted: Dict[str, int] = {}


class CatalogCleanupService:
    def __init__(
        self,
        repository: DocumentRepository,
        object_store: S3ObjectStore,
        prefixes: Iterable[str] = CLEANUP_PREFIXES,
    ):
        self.repository = repository
        self.object_store = object_store
        self.prefixes = tuple(prefixes)

    async def cleanup(self, confirm: bool = False) -> CleanupReport:
        """
        Delete all document rows, then all objects under the cleanup prefixes.

        Raises:
            ValidationError: If confirm is not set
            StoreFailure: If either store fails; already-deleted data stays deleted
        """
        if not confirm:
            raise ValidationError("Cleanup deletes all documents and files; pass confirm=True to proceed")

        report = CleanupReport()

        logger.info("🗑️  Deleting document rows...")
        report.rows_deleted = await self.repository.delete_all()
        logger.info(f"✅ Deleted {report.rows_deleted} document rows")

        for prefix in self.prefixes:
            keys = await asyncio.to_thread(self.object_store.list_keys, prefix)
            if not keys:
                logger.info(f"No objects under {prefix}")
                report.objects_deleted[prefix] = 0
                continue

            logger.info(f"🗑️  Deleting {len(keys)} objects under {prefix}")
            report.objects_deleted[prefix] = await asyncio.to_thread(self.object_store.delete_many, keys)

        logger.info(f"✅ Cleanup complete: {sum(report.objects_deleted.values())} objects deleted")
        return report

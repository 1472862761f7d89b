"""
Exam upload pipeline.

FLOW (per file, sequential):
1. Decode filename -> ExamMetadata (unparseable files are logged and skipped)
2. Build the Document row (UUID, title, storage path, created_at)
3. Put the PDF into the object store
4. Upsert the metadata row

One bad file never aborts the batch.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from ..config.settings import settings
from ..errors import CatalogError, InvalidFilenameError, NotFoundError
from ..models import Document, ExamMetadata
from ..naming import build_exam_path, build_title, decode_filename, document_storage_path
from ..storage.documents import DocumentRepository
from ..storage.objects import S3ObjectStore
from ..utils import validate_file_size

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

UPLOADED = "uploaded"
SKIPPED = "skipped"
FAILED = "failed"


class UploadSummary(BaseModel):
    total: int = 0
    uploaded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[dict] = []  # [{filename, error}]


def build_document(metadata: ExamMetadata, storage_layout: str = "uuid") -> Document:
    """Create the catalog row for a decoded file. The id is generated here and never reused."""
    document_id = str(uuid.uuid4())
    if storage_layout == "metadata":
        storage_path = build_exam_path(metadata)
    else:
        storage_path = document_storage_path(document_id)

    return Document(
        id=document_id,
        title=build_title(metadata),
        grade_level=metadata.grade_level,
        category=metadata.category,
        subject=metadata.subject,
        selection=metadata.selection,
        exam_type=metadata.exam_type,
        exam_year=metadata.exam_year,
        exam_month=metadata.exam_month,
        source=metadata.source,
        filename=metadata.filename,
        storage_path=storage_path,
    )


def list_candidate_files(data_dir: Path) -> List[Path]:
    """Regular, non-hidden files of data_dir in name order."""
    return sorted(
        path for path in data_dir.iterdir()
        if path.is_file() and not path.name.startswith(".")
    )


class ExamUploadService:
    """Uploads exam PDFs to the object store and their metadata to the catalog."""

    def __init__(
        self,
        repository: DocumentRepository,
        object_store: S3ObjectStore,
        storage_layout: Optional[str] = None,
        delay_seconds: Optional[float] = None,
    ):
        self.repository = repository
        self.object_store = object_store
        self.storage_layout = storage_layout or settings.STORAGE_LAYOUT
        self.delay_seconds = settings.BATCH_DELAY_SECONDS if delay_seconds is None else delay_seconds

    async def upload_file(self, path: Path, summary: UploadSummary) -> str:
        """Process one file and record the outcome in summary."""
        filename = path.name

        try:
            metadata = decode_filename(filename)
        except InvalidFilenameError as e:
            logger.warning(f"⚠️  Skipping invalid filename: {filename} ({e.reason})")
            summary.skipped += 1
            return SKIPPED

        try:
            pdf_bytes = await asyncio.to_thread(path.read_bytes)
            is_valid, msg = validate_file_size(pdf_bytes, settings.MAX_FILE_SIZE_MB)
            if not is_valid:
                logger.warning(f"⚠️  Skipping {filename}: {msg}")
                summary.skipped += 1
                return SKIPPED

            document = build_document(metadata, self.storage_layout)

            await asyncio.to_thread(
                self.object_store.put, document.storage_path, pdf_bytes, PDF_CONTENT_TYPE
            )
            logger.info(f"✅ Uploaded to object store: {document.storage_path}")

            await self.repository.upsert(document)
            logger.info(f"✅ Uploaded metadata: {filename} -> {document.id}")

        except (CatalogError, OSError) as e:
            logger.error(f"❌ Upload failed for {filename}: {e}")
            summary.failed += 1
            summary.errors.append({"filename": filename, "error": str(e)})
            return FAILED

        summary.uploaded += 1
        return UPLOADED

    async def upload_files(self, paths: List[Path]) -> UploadSummary:
        summary = UploadSummary(total=len(paths))

        for index, path in enumerate(paths):
            logger.info(f"Processing file {index + 1}/{len(paths)}: {path.name}")
            await self.upload_file(path, summary)

            if self.delay_seconds and index + 1 < len(paths):
                await asyncio.sleep(self.delay_seconds)

        logger.info(
            f"📊 Upload summary: {summary.uploaded}/{summary.total} uploaded, "
            f"{summary.skipped} skipped, {summary.failed} failed"
        )
        return summary

    async def upload_directory(self, data_dir: Path) -> UploadSummary:
        """Upload every file in data_dir."""
        data_dir = Path(data_dir)
        if not data_dir.is_dir():
            raise NotFoundError(f"Data directory not found: {data_dir.resolve()}")

        paths = list_candidate_files(data_dir)
        if not paths:
            logger.warning(f"No files found in {data_dir}")
        else:
            logger.info(f"📁 Found {len(paths)} files to upload")

        return await self.upload_files(paths)

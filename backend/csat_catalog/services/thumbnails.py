"""
Thumbnail generation - renders the first page of each document PDF to PNG.
"""

import asyncio
import io
import logging
from typing import Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image
from pydantic import BaseModel

from ..config.settings import settings
from ..errors import CatalogError
from ..models import Document
from ..naming import thumbnail_path
from ..storage.documents import DocumentRepository
from ..storage.objects import S3ObjectStore

logger = logging.getLogger(__name__)

PNG_CONTENT_TYPE = "image/png"
THUMBNAIL_CACHE_CONTROL = "public, max-age=31536000"  # 1 year


def render_first_page(
    pdf_bytes: bytes,
    dpi: int = 150,
    max_size: Tuple[int, int] = (800, 1200),
) -> bytes:
    """
    Render page 1 of a PDF to PNG bytes.

    The page is rasterized at dpi and then shrunk to fit inside max_size,
    preserving aspect ratio. Never enlarges.

    Raises:
        ValueError: If the PDF is invalid or has no pages
    """
    try:
        pdf_document = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise ValueError(f"Invalid PDF: {e}") from e

    try:
        if pdf_document.page_count == 0:
            raise ValueError("PDF has no pages")

        zoom = dpi / 72
        pix = pdf_document[0].get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        img = Image.open(io.BytesIO(pix.tobytes("png")))
    finally:
        pdf_document.close()

    img.thumbnail(max_size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


class ThumbnailReport(BaseModel):
    total: int = 0
    generated: int = 0
    existing: int = 0
    failed: int = 0


class ThumbnailService:
    """Generates thumbnails/{id}.png for catalog documents."""

    def __init__(
        self,
        repository: DocumentRepository,
        object_store: S3ObjectStore,
        dpi: Optional[int] = None,
        max_size: Optional[Tuple[int, int]] = None,
        delay_seconds: Optional[float] = None,
    ):
        self.repository = repository
        self.object_store = object_store
        self.dpi = dpi or settings.THUMBNAIL_DPI
        self.max_size = max_size or (settings.THUMBNAIL_MAX_WIDTH, settings.THUMBNAIL_MAX_HEIGHT)
        self.delay_seconds = settings.BATCH_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.semaphore = asyncio.Semaphore(1)  # one render at a time

    async def process_document(self, document: Document, force: bool = False) -> str:
        """Returns 'generated', 'existing' or 'failed'."""
        key = thumbnail_path(document.id)
        logger.info(f"Processing document: {document.title} ({document.id})")

        try:
            if not force and await asyncio.to_thread(self.object_store.exists, key):
                logger.info(f"Thumbnail already exists for {document.id}, skipping...")
                return "existing"

            pdf_bytes = await asyncio.to_thread(self.object_store.get, document.storage_path)

            async with self.semaphore:
                png_bytes = await asyncio.to_thread(
                    render_first_page, pdf_bytes, self.dpi, self.max_size
                )

            await asyncio.to_thread(
                self.object_store.put,
                key,
                png_bytes,
                PNG_CONTENT_TYPE,
                THUMBNAIL_CACHE_CONTROL,
            )
        except (CatalogError, ValueError) as e:
            logger.error(f"❌ Thumbnail failed for {document.id}: {e}")
            return "failed"

        logger.info(f"✅ Uploaded thumbnail: {key}")
        return "generated"

    async def generate_all(self, force: bool = False) -> ThumbnailReport:
        """
        Generate thumbnails for every document, one at a time.

        force regenerates thumbnails that already exist.
        """
        documents = await self.repository.find_all()
        report = ThumbnailReport(total=len(documents))

        if not documents:
            logger.info("No documents found in database")
            return report

        logger.info(f"Found {len(documents)} documents to process")

        for index, document in enumerate(documents):
            logger.info(f"Processing document {index + 1}/{len(documents)}")
            outcome = await self.process_document(document, force=force)
            setattr(report, outcome, getattr(report, outcome) + 1)

            if self.delay_seconds and index + 1 < len(documents):
                await asyncio.sleep(self.delay_seconds)

        logger.info(
            f"📊 Thumbnails: {report.generated} generated, {report.existing} existing, "
            f"{report.failed} failed, {report.total} total"
        )
        return report

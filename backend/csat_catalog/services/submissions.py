"""
Submission upload.

The row is inserted first to obtain its id; when a PDF is attached the
storage path is backfilled and the blob uploaded under
document_submissions/{id}.pdf.
"""

import asyncio
import base64
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from ..errors import NotFoundError
from ..models import DocumentSubmission, SubmissionCreate
from ..naming import submission_storage_path
from ..storage.documents import DocumentRepository, SubmissionRepository
from ..storage.objects import S3ObjectStore

logger = logging.getLogger(__name__)


class SubmissionService:
    """Records user attempts against catalog documents."""

    def __init__(
        self,
        documents: DocumentRepository,
        submissions: SubmissionRepository,
        object_store: S3ObjectStore,
    ):
        self.documents = documents
        self.submissions = submissions
        self.object_store = object_store

    async def submit(self, data: SubmissionCreate) -> DocumentSubmission:
        """
        Store one submission.

        Raises:
            NotFoundError: If the referenced document or the attached file does not exist
            StoreFailure: If either store rejects the operation
        """
        if await self.documents.find_by_id(data.document_id) is None:
            raise NotFoundError(f"Document not found: {data.document_id}")

        file_path = Path(data.file_path) if data.file_path else None
        if file_path is not None and not file_path.is_file():
            raise NotFoundError(f"Submission file not found: {file_path}")

        submission = DocumentSubmission(
            id=str(uuid.uuid4()),
            user_id=data.user_id,
            document_id=data.document_id,
            user_answers=data.user_answers,
            score=data.score,
            incorrect_questions=data.incorrect_questions,
            unanswered_questions=data.unanswered_questions,
        )
        await self.submissions.insert(submission)
        logger.info(f"✅ Stored submission {submission.id} for document {data.document_id}")

        if file_path is None:
            return submission

        storage_path = submission_storage_path(submission.id)
        await self.submissions.set_storage_path(submission.id, storage_path)
        submission = submission.model_copy(update={"storage_path": storage_path})

        pdf_bytes = await asyncio.to_thread(file_path.read_bytes)
        await asyncio.to_thread(
            self.object_store.put,
            storage_path,
            pdf_bytes,
            "application/pdf",
            None,
            {
                # S3 metadata must be ASCII; Korean filenames are base64 encoded
                "original-filename": base64.b64encode(file_path.name.encode("utf-8")).decode("ascii"),
                "upload-timestamp": datetime.now(timezone.utc).isoformat(),
                "type": "submission",
            },
        )
        logger.info(f"✅ Uploaded submission file: {storage_path}")
        return submission

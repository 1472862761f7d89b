"""
Record a user submission against a catalog document.

Usage:
    csat-upload-submission submission.json

submission.json:
    {
      "user_id": "...",
      "document_id": "...",
      "user_answers": {"1": 3, "2": 5},
      "score": 88,
      "incorrect_questions": [4, 17],
      "unanswered_questions": [],
      "file_path": "answers.pdf"
    }

file_path is optional; relative paths are resolved against the JSON file.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ..errors import CatalogError
from ..models import SubmissionCreate
from ..services import SubmissionService
from ._common import bootstrap, create_object_store, open_stores

logger = logging.getLogger(__name__)


def load_submission(path: Path) -> SubmissionCreate:
    data = json.loads(path.read_text(encoding="utf-8"))
    submission = SubmissionCreate(**data)
    if submission.file_path and not Path(submission.file_path).is_absolute():
        submission = submission.model_copy(
            update={"file_path": str(path.parent / submission.file_path)}
        )
    return submission


async def run(data: SubmissionCreate):
    object_store = create_object_store()
    async with open_stores() as stores:
        service = SubmissionService(stores.documents, stores.submissions, object_store)
        return await service.submit(data)


def main():
    parser = argparse.ArgumentParser(
        prog="csat-upload-submission", description="Record a submission against a document"
    )
    parser.add_argument("input", type=Path, help="JSON file describing the submission")
    args = parser.parse_args()

    bootstrap(require_object_store=True)

    try:
        data = load_submission(args.input)
    except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
        logger.error(f"❌ Could not read submission from {args.input}: {e}")
        sys.exit(1)

    try:
        submission = asyncio.run(run(data))
    except CatalogError as e:
        logger.error(f"❌ Submission failed ({e.kind}): {e.message}")
        sys.exit(1)

    print(f"✓ Submission stored: {submission.id}")
    if submission.storage_path:
        print(f"  File: {submission.storage_path}")


if __name__ == "__main__":
    main()

"""
Upload exam PDFs and their metadata.

Usage:
    csat-upload [--data-dir script/data] [--delay 1.0]

Files must follow the naming convention, e.g.
    고3_국어_국어_화법과작문_수능_2024_11_평가원_problem.pdf
Files that do not parse are skipped and reported; the exit status is 1
when any file failed to upload.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ..errors import CatalogError
from ..services import ExamUploadService
from ._common import bootstrap, create_object_store, open_stores

logger = logging.getLogger(__name__)


async def run(data_dir: Path, delay: float) -> int:
    object_store = create_object_store()
    async with open_stores() as stores:
        service = ExamUploadService(stores.documents, object_store, delay_seconds=delay)
        summary = await service.upload_directory(data_dir)

    print()
    print(f"Total:    {summary.total}")
    print(f"Uploaded: {summary.uploaded}")
    print(f"Skipped:  {summary.skipped}")
    print(f"Failed:   {summary.failed}")
    for error in summary.errors:
        print(f"  ✗ {error['filename']}: {error['error']}")

    return 1 if summary.failed else 0


def main():
    parser = argparse.ArgumentParser(prog="csat-upload", description="Upload exam PDFs to the catalog")
    parser.add_argument("--data-dir", type=Path, default=Path("script/data"), help="directory of exam PDFs")
    parser.add_argument("--delay", type=float, default=None, help="seconds to wait between files")
    args = parser.parse_args()

    app_settings = bootstrap(require_object_store=True)
    delay = app_settings.BATCH_DELAY_SECONDS if args.delay is None else args.delay

    try:
        sys.exit(asyncio.run(run(args.data_dir, delay)))
    except CatalogError as e:
        logger.error(f"❌ Upload aborted: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()

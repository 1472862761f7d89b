"""
Generate first-page thumbnails for catalog documents.

Usage:
    csat-thumbnails [--force] [--delay 1.0]

--force regenerates thumbnails that already exist.
"""

import argparse
import asyncio
import logging
import sys

from ..errors import CatalogError
from ..services import ThumbnailService
from ._common import bootstrap, create_object_store, open_stores

logger = logging.getLogger(__name__)


async def run(force: bool, delay: float) -> int:
    object_store = create_object_store()
    async with open_stores() as stores:
        service = ThumbnailService(stores.documents, object_store, delay_seconds=delay)
        report = await service.generate_all(force=force)

    print(f"Generated: {report.generated}, existing: {report.existing}, failed: {report.failed}")
    return 1 if report.failed else 0


def main():
    parser = argparse.ArgumentParser(prog="csat-thumbnails", description="Generate document thumbnails")
    parser.add_argument("--force", action="store_true", help="regenerate existing thumbnails")
    parser.add_argument("--delay", type=float, default=None, help="seconds to wait between documents")
    args = parser.parse_args()

    app_settings = bootstrap(require_object_store=True)
    delay = app_settings.BATCH_DELAY_SECONDS if args.delay is None else args.delay

    try:
        sys.exit(asyncio.run(run(args.force, delay)))
    except CatalogError as e:
        logger.error(f"❌ Thumbnail generation aborted: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()

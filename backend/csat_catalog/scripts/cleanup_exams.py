"""
Delete every document row and every exam object.

Usage:
    csat-cleanup --confirm
"""

import argparse
import asyncio
import logging
import sys

from ..errors import CatalogError
from ..services import CatalogCleanupService
from ._common import bootstrap, create_object_store, open_stores

logger = logging.getLogger(__name__)


async def run(confirm: bool):
    object_store = create_object_store()
    async with open_stores() as stores:
        service = CatalogCleanupService(stores.documents, object_store)
        return await service.cleanup(confirm=confirm)


def main():
    parser = argparse.ArgumentParser(prog="csat-cleanup", description="Wipe the exam catalog")
    parser.add_argument("--confirm", action="store_true", help="required: acknowledge that all data is deleted")
    args = parser.parse_args()

    if not args.confirm:
        print("⚠️  This deletes ALL documents and exam files.")
        print("Re-run with --confirm to proceed.")
        sys.exit(1)

    bootstrap(require_object_store=True)

    try:
        report = asyncio.run(run(args.confirm))
    except CatalogError as e:
        logger.error(f"❌ Cleanup failed: {e.message}")
        sys.exit(1)

    print(f"Rows deleted: {report.rows_deleted}")
    for prefix, count in report.objects_deleted.items():
        print(f"Objects deleted under {prefix}: {count}")


if __name__ == "__main__":
    main()

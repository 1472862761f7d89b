"""
Repair Korean text stored in decomposed (NFD) form.

Usage:
    csat-fix-korean show [--limit 5]   # list examples, change nothing
    csat-fix-korean fix                # rewrite non-canonical fields
    csat-fix-korean categories         # re-derive category from subject

fix is safe to re-run: rows already in canonical form are not touched.
"""

import argparse
import asyncio
import logging
import sys

from ..errors import CatalogError
from ..services import NormalizationRepairService
from ._common import bootstrap, open_stores

logger = logging.getLogger(__name__)


async def cmd_show(service: NormalizationRepairService, args):
    issues = await service.scan(limit=args.limit)
    if not issues:
        print("✓ All text fields are in canonical form")
        return 0

    for issue in issues:
        print(f"[{issue.id}] {issue.field}")
        print(f"  stored:    {issue.stored!r} ({len(issue.stored)} code points)")
        print(f"  canonical: {issue.canonical!r} ({len(issue.canonical)} code points)")
    return 0


async def cmd_fix(service: NormalizationRepairService, args):
    report = await service.fix()
    print(f"Checked: {report.checked}, with issues: {report.with_issues}, "
          f"fixed: {report.fixed}, failed: {report.failed}")
    return 1 if report.failed else 0


async def cmd_categories(service: NormalizationRepairService, args):
    report = await service.repair_categories()
    print(f"Checked: {report.checked}, updated: {report.fixed}, failed: {report.failed}")
    return 1 if report.failed else 0


async def run(args) -> int:
    async with open_stores() as stores:
        service = NormalizationRepairService(stores.documents)
        return await args.func(service, args)


def main():
    parser = argparse.ArgumentParser(prog="csat-fix-korean", description="Repair Korean text normalization")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_show = subparsers.add_parser("show", help="list non-canonical fields")
    p_show.add_argument("--limit", type=int, default=5)
    p_show.set_defaults(func=cmd_show)

    p_fix = subparsers.add_parser("fix", help="rewrite non-canonical fields")
    p_fix.set_defaults(func=cmd_fix)

    p_categories = subparsers.add_parser("categories", help="re-derive category from subject")
    p_categories.set_defaults(func=cmd_categories)

    args = parser.parse_args()
    bootstrap(require_object_store=False)

    try:
        sys.exit(asyncio.run(run(args)))
    except CatalogError as e:
        logger.error(f"❌ {args.command} failed: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()

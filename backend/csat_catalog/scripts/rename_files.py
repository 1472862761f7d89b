"""
Rename official CSAT downloads into the catalog naming convention.

Usage:
    csat-rename [--dir script/data] [--grade 고3] [--exam-type 수능]
                [--year 2024] [--month 11] [--source 평가원] [--yes]
"""

import argparse
import sys
from pathlib import Path

from ..config.settings import configure_logging, settings
from ..services import RenameDefaults, apply_renames, plan_renames


def main():
    defaults = RenameDefaults()
    parser = argparse.ArgumentParser(prog="csat-rename", description="Rename official CSAT PDF downloads")
    parser.add_argument("--dir", type=Path, default=Path("script/data"), help="directory of downloaded PDFs")
    parser.add_argument("--grade", default=defaults.grade_level)
    parser.add_argument("--exam-type", default=defaults.exam_type)
    parser.add_argument("--year", type=int, default=defaults.exam_year)
    parser.add_argument("--month", type=int, default=defaults.exam_month)
    parser.add_argument("--source", default=defaults.source)
    parser.add_argument("--yes", action="store_true", help="rename without asking for confirmation")
    args = parser.parse_args()

    configure_logging(settings)

    if not args.dir.is_dir():
        print(f"Error: directory not found: {args.dir}", file=sys.stderr)
        sys.exit(1)

    plan = plan_renames(
        args.dir,
        RenameDefaults(args.grade, args.exam_type, args.year, args.month, args.source),
    )
    if not plan:
        print("No PDF files found.")
        return

    print("Planned renames:")
    for path, new_name in plan:
        print(f"  {path.name}")
        print(f"    -> {new_name or '(skipped)'}")

    if not args.yes:
        answer = input("\nProceed with renaming? (y/N): ")
        if answer.strip().lower() != "y":
            print("Renaming cancelled.")
            return

    renamed, skipped = apply_renames(plan)
    print(f"\nRenamed: {renamed}, skipped: {skipped}")


if __name__ == "__main__":
    main()

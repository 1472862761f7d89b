"""
Rename official CSAT downloads into the catalog naming convention.

    2025학년도-대학수학능력시험-물리학1-문제.pdf
        -> 고3_과학탐구_물리학 I__수능_2024_11_평가원_problem.pdf

The official name carries only the subject and the document kind; grade,
exam type, year, month and source are fixed per batch.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple

from ..models import ExamMetadata
from ..naming import build_filename
from ..text import normalize

logger = logging.getLogger(__name__)


class SubjectInfo(NamedTuple):
    category: str
    subject: str
    selection: str = ""


# Official subject token -> catalog category/subject/selection
SUBJECT_MAPPINGS: Dict[str, SubjectInfo] = {
    "국어": SubjectInfo("국어", "국어"),
    "수학": SubjectInfo("수학", "수학"),
    "영어": SubjectInfo("영어", "영어"),
    "한국사": SubjectInfo("한국사", "한국사"),
    # 사회탐구
    "생활과윤리": SubjectInfo("사회탐구", "생활과 윤리"),
    "윤리와사상": SubjectInfo("사회탐구", "윤리와 사상"),
    "한국지리": SubjectInfo("사회탐구", "한국지리"),
    "세계지리": SubjectInfo("사회탐구", "세계지리"),
    "동아시아사": SubjectInfo("사회탐구", "동아시아사"),
    "세계사": SubjectInfo("사회탐구", "세계사"),
    "경제": SubjectInfo("사회탐구", "경제"),
    "정치와법": SubjectInfo("사회탐구", "정치와 법"),
    "사회문화": SubjectInfo("사회탐구", "사회·문화"),
    # 과학탐구
    "물리학1": SubjectInfo("과학탐구", "물리학 I"),
    "물리학2": SubjectInfo("과학탐구", "물리학 II"),
    "화학1": SubjectInfo("과학탐구", "화학 I"),
    "화학2": SubjectInfo("과학탐구", "화학 II"),
    "생명과학1": SubjectInfo("과학탐구", "생명과학 I"),
    "생명과학2": SubjectInfo("과학탐구", "생명과학 II"),
    "지구과학1": SubjectInfo("과학탐구", "지구과학 I"),
    "지구과학2": SubjectInfo("과학탐구", "지구과학 II"),
}

# Catalog subject -> category, used to repair miscategorized rows
SUBJECT_CATEGORIES: Dict[str, str] = {
    info.subject: info.category for info in SUBJECT_MAPPINGS.values()
}

DOC_TYPE_MAPPINGS = {
    "문제": "problem",
    "정답": "answer",
    "답지": "answer",
}

# "{학년도}학년도-대학수학능력시험-{subject}-{문제|정답|답지}" with an optional "-N" part suffix
OFFICIAL_NAME_PATTERN = re.compile(
    r"^(\d{4})학년도-대학수학능력시험-(.+?)-(문제|정답|답지)(?:-\d+)?$"
)


class RenameDefaults(NamedTuple):
    grade_level: str = "고3"
    exam_type: str = "수능"
    exam_year: int = 2024
    exam_month: int = 11
    source: str = "평가원"


def parse_official_name(filename: str) -> Optional[Tuple[str, str]]:
    """Return (subject token, doc kind token) of an official download name."""
    match = OFFICIAL_NAME_PATTERN.match(normalize(Path(filename).stem))
    if not match:
        return None
    return match.group(2), match.group(3)


def generate_new_filename(old_filename: str, defaults: RenameDefaults = RenameDefaults()) -> Optional[str]:
    """Target name for an official download, or None when it cannot be mapped."""
    parsed = parse_official_name(old_filename)
    if parsed is None:
        logger.warning(f"Could not parse filename: {old_filename}")
        return None

    subject_key, doc_key = parsed
    info = SUBJECT_MAPPINGS.get(subject_key)
    if info is None:
        logger.warning(f"Unknown subject: {subject_key}")
        return None

    metadata = ExamMetadata(
        grade_level=defaults.grade_level,
        category=info.category,
        subject=info.subject,
        selection=info.selection,
        exam_type=defaults.exam_type,
        exam_year=defaults.exam_year,
        exam_month=defaults.exam_month,
        source=defaults.source,
        doc_type=DOC_TYPE_MAPPINGS[doc_key],
    )
    return build_filename(metadata)


def plan_renames(directory: Path, defaults: RenameDefaults = RenameDefaults()) -> List[Tuple[Path, Optional[str]]]:
    """(path, new name or None) for every PDF in directory, in name order."""
    paths = sorted(p for p in Path(directory).iterdir() if p.is_file() and p.suffix == ".pdf")
    return [(path, generate_new_filename(path.name, defaults)) for path in paths]


def apply_renames(plan: List[Tuple[Path, Optional[str]]]) -> Tuple[int, int]:
    """Rename according to plan. Returns (renamed, skipped)."""
    renamed = skipped = 0
    for path, new_name in plan:
        if not new_name:
            logger.info(f"✗ Skipped: {path.name}")
            skipped += 1
            continue

        target = path.with_name(new_name)
        if target.exists() and target != path:
            logger.error(f"✗ Target already exists, not overwriting: {new_name}")
            skipped += 1
            continue

        try:
            path.rename(target)
        except OSError as e:
            logger.error(f"✗ Error renaming {path.name}: {e}")
            skipped += 1
            continue

        logger.info(f"✓ Renamed: {path.name} -> {new_name}")
        renamed += 1

    return renamed, skipped

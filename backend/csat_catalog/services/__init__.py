"""Catalog services"""

from .catalog import DocumentCatalogService
from .cleanup import CatalogCleanupService, CleanupReport
from .ingestion import ExamUploadService, UploadSummary, build_document
from .renaming import RenameDefaults, apply_renames, generate_new_filename, plan_renames
from .repair import NormalizationRepairService, RepairReport
from .submissions import SubmissionService
from .thumbnails import ThumbnailReport, ThumbnailService, render_first_page

__all__ = [
    "DocumentCatalogService",
    "CatalogCleanupService",
    "CleanupReport",
    "ExamUploadService",
    "UploadSummary",
    "build_document",
    "RenameDefaults",
    "apply_renames",
    "generate_new_filename",
    "plan_renames",
    "NormalizationRepairService",
    "RepairReport",
    "SubmissionService",
    "ThumbnailReport",
    "ThumbnailService",
    "render_first_page",
]

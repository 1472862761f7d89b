"""Adapters for the metadata store (MongoDB) and the object store (S3)."""

from .documents import DocumentRepository, SubmissionRepository, build_filter_query
from .objects import S3ObjectStore, create_s3_client

__all__ = [
    "DocumentRepository",
    "SubmissionRepository",
    "build_filter_query",
    "S3ObjectStore",
    "create_s3_client",
]

"""API routes"""

from .documents import create_document_routes

__all__ = ["create_document_routes"]

"""
Document catalog routes.

Endpoints:
- GET /documents
- GET /documents/filtered?grade_levels=고3,고2&categories=국어&exam_years=2024&exam_months=6,9
  (camelCase aliases gradeLevels/examYears/examMonths are accepted too)
- GET /documents/filters/available
- GET /documents/categories/list
- GET /documents/subjects/list
- GET /documents/category/{category}
- GET /documents/subject/{subject}
- GET /documents/{id}

Every response uses the envelope {success, data, count?}. Failures keep the
envelope shape with an empty data value and add {error: {kind, message}}.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config.settings import Settings
from ..errors import CatalogError
from ..models import AvailableFilters, DocumentFilters
from ..services import DocumentCatalogService
from ..utils import parse_int_set, parse_text_set

logger = logging.getLogger(__name__)


def get_catalog(request: Request) -> DocumentCatalogService:
    """Catalog service created in the application lifespan."""
    return request.app.state.catalog


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _serialize(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


def ok(data: Any, with_count: bool = False) -> dict:
    body = {"success": True, "data": _serialize(data)}
    if with_count:
        body["count"] = len(data)
    return body


def failure(error: Exception, empty: Any) -> JSONResponse:
    """Failure envelope; unknown exceptions are reported as internal errors."""
    if not isinstance(error, CatalogError):
        logger.exception(f"Unexpected error: {error}")
        error = CatalogError("Internal server error")
    elif error.status_code >= 500:
        logger.error(f"{error.kind}: {error.message}")

    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "data": empty, "count": 0, "error": error.to_dict()},
    )


def _query_param(params, name: str) -> Optional[str]:
    """Read a filter parameter by its snake_case name or its camelCase alias (gradeLevels)."""
    if name in params:
        return params[name]
    head, *rest = name.split("_")
    return params.get(head + "".join(part.title() for part in rest))


def available_to_wire(available: AvailableFilters) -> dict:
    return {
        "gradeLevels": available.grade_levels,
        "categories": available.categories,
        "examYears": available.exam_years,
        "examMonths": available.exam_months,
    }


def create_document_routes() -> APIRouter:
    """Create document catalog routes."""

    router = APIRouter(prefix="/documents", tags=["documents"])

    @router.get("")
    async def list_documents(catalog: DocumentCatalogService = Depends(get_catalog)):
        """All documents, newest first."""
        try:
            documents = await catalog.list_all()
            return ok(documents, with_count=True)
        except Exception as e:
            return failure(e, [])

    @router.get("/filtered")
    async def get_filtered_documents(
        request: Request,
        catalog: DocumentCatalogService = Depends(get_catalog),
        app_settings: Settings = Depends(get_settings),
    ):
        """Documents matching all supplied filters (comma-separated values)."""
        try:
            strict = app_settings.STRICT_FILTER_PARAMS
            params = request.query_params
            filters = DocumentFilters(
                grade_levels=parse_text_set(_query_param(params, "grade_levels")),
                categories=parse_text_set(_query_param(params, "categories")),
                exam_years=parse_int_set(_query_param(params, "exam_years"), "exam_years", strict),
                exam_months=parse_int_set(_query_param(params, "exam_months"), "exam_months", strict),
            )
            documents = await catalog.get_filtered(filters)
            return ok(documents, with_count=True)
        except Exception as e:
            return failure(e, [])

    @router.get("/filters/available")
    async def get_available_filters(catalog: DocumentCatalogService = Depends(get_catalog)):
        try:
            available = await catalog.get_available_filter_values()
            return ok(available_to_wire(available))
        except Exception as e:
            return failure(e, available_to_wire(AvailableFilters()))

    @router.get("/categories/list")
    async def list_exam_types(catalog: DocumentCatalogService = Depends(get_catalog)):
        """Distinct exam types."""
        try:
            return ok(await catalog.list_exam_types())
        except Exception as e:
            return failure(e, [])

    @router.get("/subjects/list")
    async def list_subjects(catalog: DocumentCatalogService = Depends(get_catalog)):
        try:
            return ok(await catalog.list_subjects())
        except Exception as e:
            return failure(e, [])

    @router.get("/category/{category}")
    async def get_documents_by_category(
        category: str, catalog: DocumentCatalogService = Depends(get_catalog)
    ):
        try:
            documents = await catalog.get_by_category(category)
            return ok(documents, with_count=True)
        except Exception as e:
            return failure(e, [])

    @router.get("/subject/{subject}")
    async def get_documents_by_subject(
        subject: str, catalog: DocumentCatalogService = Depends(get_catalog)
    ):
        try:
            documents = await catalog.get_by_subject(subject)
            return ok(documents, with_count=True)
        except Exception as e:
            return failure(e, [])

    @router.get("/{document_id}")
    async def get_document(document_id: str, catalog: DocumentCatalogService = Depends(get_catalog)):
        try:
            document = await catalog.get_by_id(document_id)
            return ok(document)
        except Exception as e:
            return failure(e, None)

    return router

import unicodedata
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from conftest import make_document
from csat_catalog.config import Settings
from csat_catalog.errors import StoreFailure
from csat_catalog.services import DocumentCatalogService
from csat_catalog.app import create_app


@pytest.fixture
def catalog(repository, seed):
    seed(
        make_document(1, grade_level="고3", category="국어", exam_year=2024, exam_month=11),
        make_document(2, grade_level="고3", category="수학", subject="수학", exam_year=2023, exam_month=6),
        make_document(3, grade_level="고2", category="국어", exam_year=2024, exam_month=9, exam_type="모의고사"),
    )
    return DocumentCatalogService(repository)


def _client(catalog, strict=False):
    app_settings = Settings()
    app_settings.STRICT_FILTER_PARAMS = strict
    return TestClient(create_app(app_settings, catalog=catalog))


@pytest.fixture
def client(catalog):
    with _client(catalog) as test_client:
        yield test_client


class _BrokenCatalog:
    async def list_all(self):
        raise StoreFailure("Failed to fetch documents: connection refused")

    async def get_by_id(self, document_id):
        raise RuntimeError("boom")


class TestDocumentRoutes:
    def test_list(self, client):
        body = client.get("/documents").json()
        assert body["success"] is True
        assert body["count"] == 3
        assert [d["id"] for d in body["data"]] == ["doc-3", "doc-2", "doc-1"]

    def test_get_by_id(self, client):
        response = client.get("/documents/doc-2")
        assert response.status_code == 200
        assert response.json()["data"]["subject"] == "수학"

    def test_get_by_id_missing(self, client):
        response = client.get("/documents/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["kind"] == "not_found"

    def test_category_with_decomposed_path(self, client):
        category = quote(unicodedata.normalize("NFD", "국어"))
        body = client.get(f"/documents/category/{category}").json()
        assert [d["id"] for d in body["data"]] == ["doc-3", "doc-1"]

    def test_subject_without_documents(self, client):
        response = client.get(f"/documents/subject/{quote('물리학 I')}")
        assert response.status_code == 404
        assert response.json()["data"] == []
        assert response.json()["count"] == 0

    def test_lists(self, client):
        assert client.get("/documents/categories/list").json()["data"] == ["모의고사", "수능"]
        assert client.get("/documents/subjects/list").json()["data"] == ["국어", "수학"]

    def test_available_filters_wire_keys(self, client):
        data = client.get("/documents/filters/available").json()["data"]
        assert data == {
            "gradeLevels": ["고2", "고3"],
            "categories": ["국어", "수학"],
            "examYears": [2024, 2023],
            "examMonths": [6, 9, 11],
        }


class TestFilteredRoute:
    def test_and_across_fields(self, client):
        body = client.get("/documents/filtered", params={"gradeLevels": "고3", "categories": "국어"}).json()
        assert [d["id"] for d in body["data"]] == ["doc-1"]

    def test_or_within_field_and_trimming(self, client):
        body = client.get("/documents/filtered", params={"examMonths": " 6, 9 "}).json()
        assert [d["id"] for d in body["data"]] == ["doc-3", "doc-2"]

    def test_snake_case_params(self, client):
        body = client.get("/documents/filtered", params={"grade_levels": "고3", "exam_years": "2023"}).json()
        assert [d["id"] for d in body["data"]] == ["doc-2"]

    def test_no_params_returns_all(self, client):
        assert client.get("/documents/filtered").json()["count"] == 3

    def test_empty_or_blank_parameter_is_unconstrained(self, client):
        assert client.get("/documents/filtered", params={"gradeLevels": ""}).json()["count"] == 3
        assert client.get("/documents/filtered", params={"examYears": " , "}).json()["count"] == 3

    def test_only_unparseable_values_match_nothing(self, client):
        response = client.get("/documents/filtered", params={"exam_years": "2O24"})
        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["count"] == 0

    def test_digit_separators_and_signs_are_not_numbers(self, client):
        body = client.get("/documents/filtered", params={"exam_years": "2_024", "exam_months": "-6"}).json()
        assert body["count"] == 0

    def test_unparseable_year_dropped(self, client):
        response = client.get("/documents/filtered", params={"examYears": "2024,abc"})
        assert response.status_code == 200
        assert [d["id"] for d in response.json()["data"]] == ["doc-3", "doc-1"]

    def test_unparseable_year_rejected_when_strict(self, catalog):
        with _client(catalog, strict=True) as strict_client:
            response = strict_client.get("/documents/filtered", params={"examYears": "2024,abc"})
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation"

    def test_only_unparseable_values_rejected_when_strict(self, catalog):
        with _client(catalog, strict=True) as strict_client:
            response = strict_client.get("/documents/filtered", params={"exam_years": "2O24"})
        assert response.status_code == 400
        assert response.json()["count"] == 0


class TestErrorEnvelope:
    def test_store_failure_is_503(self):
        with _client(_BrokenCatalog()) as client:
            response = client.get("/documents")
        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "data": [],
            "count": 0,
            "error": {"kind": "store_failure", "message": "Failed to fetch documents: connection refused"},
        }

    def test_unexpected_error_is_500(self):
        with _client(_BrokenCatalog()) as client:
            response = client.get("/documents/doc-1")
        assert response.status_code == 500
        assert response.json()["error"]["kind"] == "internal"


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"

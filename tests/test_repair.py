import asyncio
import unicodedata

import pytest

from conftest import make_document
from csat_catalog.services import NormalizationRepairService


def nfd(text):
    return unicodedata.normalize("NFD", text)


@pytest.fixture
def service(repository):
    return NormalizationRepairService(repository)


@pytest.fixture
def legacy_rows(seed, documents_collection):
    seed(make_document(1), make_document(2), make_document(3))
    # rows written before input normalization; bypass the model validators
    documents_collection.rows[0]["category"] = nfd("국어")
    documents_collection.rows[0]["title"] = nfd("고3 국어 국어 수능 2024년 11월 평가원")
    documents_collection.rows[2]["subject"] = nfd("국어")
    return documents_collection


class TestScan:
    def test_reports_without_modifying(self, service, legacy_rows):
        issues = asyncio.run(service.scan(limit=5))

        assert {(issue.id, issue.field) for issue in issues} == {
            ("doc-1", "category"),
            ("doc-1", "title"),
            ("doc-3", "subject"),
        }
        assert legacy_rows.rows[0]["category"] == nfd("국어")
        assert legacy_rows.update_calls == 0

    def test_limit(self, service, legacy_rows):
        assert len(asyncio.run(service.scan(limit=1))) == 1


class TestFix:
    def test_only_non_canonical_rows_are_rewritten(self, service, legacy_rows):
        report = asyncio.run(service.fix())

        assert report.checked == 3
        assert report.with_issues == 2
        assert report.fixed == 2
        assert legacy_rows.update_calls == 2
        assert legacy_rows.rows[0]["category"] == "국어"
        assert legacy_rows.rows[2]["subject"] == "국어"

    def test_second_run_is_a_no_op(self, service, legacy_rows):
        asyncio.run(service.fix())
        calls = legacy_rows.update_calls

        report = asyncio.run(service.fix())

        assert report.with_issues == 0
        assert report.fixed == 0
        assert legacy_rows.update_calls == calls

    def test_clean_catalog_writes_nothing(self, service, seed, documents_collection):
        seed(make_document(1))
        asyncio.run(service.fix())
        assert documents_collection.update_calls == 0


class TestRepairCategories:
    def test_category_derived_from_subject(self, service, seed, documents_collection):
        seed(
            make_document(1, category="국어", subject="물리학 I"),
            make_document(2, category="과학탐구", subject="화학 II"),
            make_document(3, category="국어", subject="알 수 없음"),
        )

        report = asyncio.run(service.repair_categories())

        assert report.fixed == 1
        assert documents_collection.rows[0]["category"] == "과학탐구"
        assert documents_collection.rows[2]["category"] == "국어"

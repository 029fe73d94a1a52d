"""
Unit tests for ReportService.
"""

import logging
from unittest.mock import Mock

import pytest

from src.domain.exceptions import NotFound, ValidationError
from src.domain.reports import ReportService


@pytest.fixture
def filer_id(verification_service, identity_factory) -> str:
    return verification_service.register(identity_factory()).identity_id


class TestFileGrievance:
    def test_stores_report_and_returns_its_id(self, report_repository, filer_id) -> None:
        report_id = ReportService(report_repository).file_grievance(
            filer_id,
            category="Financial fraud",
            description="UPI collect request from fake bank agent",
            subcategory="UPI",
            location="Bengaluru",
        )

        [report] = report_repository.grievances
        assert report.id == report_id
        assert report.user_id == filer_id
        assert report.category == "Financial fraud"
        assert report.subcategory == "UPI"
        assert report.location == "Bengaluru"
        assert report.anonymous is False
        assert report.status == "pending"
        assert report.priority == "medium"

    def test_anonymous_report_keeps_filer(self, report_repository, filer_id) -> None:
        ReportService(report_repository).file_grievance(
            filer_id, category="Sextortion", description="Threatening calls", anonymous=True
        )

        [report] = report_repository.grievances
        assert report.anonymous is True
        assert report.user_id == filer_id

    def test_blank_optional_fields_stored_as_none(self, report_repository, filer_id) -> None:
        ReportService(report_repository).file_grievance(
            filer_id, category="Phishing", description="Fake KYC link", subcategory="  ", location=""
        )

        [report] = report_repository.grievances
        assert report.subcategory is None
        assert report.location is None

    @pytest.mark.parametrize("field", ["category", "description"])
    def test_blank_required_field_rejected(self, report_repository, filer_id, field) -> None:
        fields = {"category": "Phishing", "description": "Fake KYC link", field: "   "}

        with pytest.raises(ValidationError, match=field):
            ReportService(report_repository).file_grievance(filer_id, **fields)

        assert report_repository.grievances == []

    def test_unknown_filer_raises_not_found(self, report_repository) -> None:
        with pytest.raises(NotFound):
            ReportService(report_repository).file_grievance(
                "no-such-user", category="Phishing", description="Fake KYC link"
            )

    def test_each_report_gets_a_fresh_id(self, report_repository, filer_id) -> None:
        service = ReportService(report_repository)

        first = service.file_grievance(filer_id, category="Phishing", description="one")
        second = service.file_grievance(filer_id, category="Phishing", description="two")

        assert first != second

    def test_logs_filing(self, report_repository, filer_id, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="src.domain.reports"):
            report_id = ReportService(report_repository).file_grievance(
                filer_id, category="Phishing", description="Fake KYC link"
            )

        assert report_id in caplog.text


class TestReportSuspicious:
    def test_stores_entity_and_returns_its_id(self, report_repository, filer_id) -> None:
        entity_id = ReportService(report_repository).report_suspicious(
            filer_id,
            entity_type="phone",
            entity_value="+919000000001",
            description="Calls claiming to be customs",
        )

        [entity] = report_repository.suspicious_entities
        assert entity.id == entity_id
        assert entity.user_id == filer_id
        assert entity.entity_type == "phone"
        assert entity.entity_value == "+919000000001"
        assert entity.status == "pending"

    @pytest.mark.parametrize("field", ["entity_type", "entity_value", "description"])
    def test_blank_field_rejected(self, field) -> None:
        repository = Mock()
        fields = {
            "entity_type": "website",
            "entity_value": "http://kyc-update.example",
            "description": "Phishing page",
            field: "",
        }

        with pytest.raises(ValidationError, match=field):
            ReportService(repository).report_suspicious("user-1", **fields)

        repository.add_suspicious_entity.assert_not_called()

    def test_unknown_filer_raises_not_found(self, report_repository) -> None:
        with pytest.raises(NotFound):
            ReportService(report_repository).report_suspicious(
                "no-such-user", entity_type="phone", entity_value="+919000000001", description="x"
            )

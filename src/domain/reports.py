"""
Report domain service - citizen grievance and suspicious entity reports.

Text fields only; evidence attachments are not handled here.
"""

import logging
import uuid
from dataclasses import dataclass

from .exceptions import ValidationError
from .ports import GrievanceReport, ReportRepository, SuspiciousEntityReport

logger = logging.getLogger(__name__)


def _blank(**fields: str | None) -> list[str]:
    return [name for name, value in fields.items() if not value or not value.strip()]


def _optional(value: str | None) -> str | None:
    """Blank optional text is stored as NULL."""
    if value is None or not value.strip():
        return None
    return value


@dataclass
class ReportService:
    """Domain service for filing citizen reports."""

    repository: ReportRepository

    def file_grievance(
        self,
        user_id: str,
        category: str,
        description: str,
        subcategory: str | None = None,
        location: str | None = None,
        anonymous: bool = False,
    ) -> str:
        """
        Record a fraud grievance filed by `user_id`.

        An anonymous report still records its filer; the flag tells
        downstream reviewers not to disclose the identity.

        Returns:
            Id of the new report

        Raises:
            ValidationError: If category or description is blank
            NotFound: If no identity has this id
        """
        blank = _blank(category=category, description=description)
        if blank:
            raise ValidationError(", ".join(blank))

        report = GrievanceReport(
            id=str(uuid.uuid4()),
            user_id=user_id,
            category=category,
            description=description,
            subcategory=_optional(subcategory),
            location=_optional(location),
            anonymous=anonymous,
        )
        self.repository.add_grievance(report)
        logger.info("Grievance %s filed by %s (%s)", report.id, user_id, category)
        return report.id

    def report_suspicious(
        self, user_id: str, entity_type: str, entity_value: str, description: str
    ) -> str:
        """
        Record a suspicious entity reported by `user_id`.

        Raises:
            ValidationError: If any field is blank
            NotFound: If no identity has this id
        """
        blank = _blank(
            entity_type=entity_type, entity_value=entity_value, description=description
        )
        if blank:
            raise ValidationError(", ".join(blank))

        report = SuspiciousEntityReport(
            id=str(uuid.uuid4()),
            user_id=user_id,
            entity_type=entity_type,
            entity_value=entity_value,
            description=description,
        )
        self.repository.add_suspicious_entity(report)
        logger.info("Suspicious %s reported by %s", entity_type, user_id)
        return report.id

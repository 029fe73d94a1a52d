"""
Data request domain service - officer requests for entity data.
"""

import logging
import uuid
from dataclasses import dataclass

from .exceptions import ValidationError
from .ports import DataRequest, DataRequestRepository

logger = logging.getLogger(__name__)

URGENCY_LEVELS = ("low", "medium", "high")


@dataclass
class DataRequestService:
    repository: DataRequestRepository

    def create(
        self,
        officer_id: str,
        request_type: str,
        target_entity: str,
        justification: str,
        urgency: str = "medium",
    ) -> str:
        """
        Record a data request on behalf of an officer.

        Returns:
            Id of the new request

        Raises:
            ValidationError: If a field is blank or urgency is unknown
        """
        fields = {
            "request_type": request_type,
            "target_entity": target_entity,
            "justification": justification,
        }
        blank = [name for name, value in fields.items() if not value or not value.strip()]
        if blank:
            raise ValidationError(", ".join(blank))
        if urgency not in URGENCY_LEVELS:
            raise ValidationError("urgency")

        request = DataRequest(
            id=str(uuid.uuid4()),
            officer_id=officer_id,
            request_type=request_type,
            target_entity=target_entity,
            justification=justification,
            urgency=urgency,
            status="pending",
        )
        self.repository.add(request)
        logger.info("Data request %s filed by officer %s", request.id, officer_id)
        return request.id

    def list_requests(self) -> list[DataRequest]:
        return self.repository.list_recent()

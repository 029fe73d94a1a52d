"""
Shared test fixtures and configuration.

This module provides:
- A signing key in the environment so Settings can load
- In-memory fakes for the repository ports, with the same
  compare-and-set semantics as the PostgreSQL adapter
- A controllable clock and a recording code sender
"""

import os
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("JWT_SECRET", "test-signing-key-not-for-production")

from src.adapters.tokens.jwt import JwtTokenIssuer  # noqa: E402
from src.domain.exceptions import Conflict, NotFound  # noqa: E402
from src.domain.ports import (  # noqa: E402
    DataRequest,
    GrievanceReport,
    Identity,
    NewIdentity,
    ProfileUpdate,
    Role,
    SuspiciousEntityReport,
)
from src.domain.verification import VerificationService  # noqa: E402

TEST_JWT_SECRET = "test-signing-key-not-for-production"


class MutableClock:
    """Clock whose current time tests can move."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingCodeSender:
    """CodeSender that remembers every code and can simulate failure."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[str, str]] = []

    def send_code(self, destination: str, code: str) -> bool:
        self.sent.append((destination, code))
        return self.succeed

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


class FakeIdentityRepository:
    """
    In-memory IdentityRepository.

    A single lock serializes every call, mirroring the per-row atomicity
    the PostgreSQL adapter gets from single-statement updates.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.identities: dict[str, Identity] = {}

    def create(
        self, identity_id: str, identity: NewIdentity, code: str, code_expires_at: datetime
    ) -> bool:
        with self._lock:
            for existing in self.identities.values():
                if (
                    existing.aadhaar_number == identity.aadhaar_number
                    or existing.email == identity.email
                    or existing.phone_number == identity.phone_number
                ):
                    return False
            self.identities[identity_id] = Identity(
                id=identity_id,
                full_name=identity.full_name,
                aadhaar_number=identity.aadhaar_number,
                phone_number=identity.phone_number,
                email=identity.email,
                address=identity.address,
                role=identity.role,
                password_hash=None,
                is_verified=False,
                otp=code,
                otp_expires_at=code_expires_at,
            )
            return True

    def find_by_id(self, identity_id: str) -> Identity | None:
        with self._lock:
            return self.identities.get(identity_id)

    def find_verified_by_id(self, identity_id: str, role: Role | None = None) -> Identity | None:
        with self._lock:
            identity = self.identities.get(identity_id)
        if identity is None or not identity.is_verified:
            return None
        if role is not None and identity.role != role:
            return None
        return identity

    def _code_matches(self, identity: Identity | None, code: str, now: datetime) -> bool:
        return (
            identity is not None
            and identity.otp == code
            and identity.otp_expires_at is not None
            and identity.otp_expires_at > now
        )

    def set_secret_and_verify(
        self, identity_id: str, code: str, secret_hash: str, now: datetime
    ) -> bool:
        with self._lock:
            identity = self.identities.get(identity_id)
            if not self._code_matches(identity, code, now) or identity.is_verified:
                return False
            self.identities[identity_id] = replace(
                identity,
                password_hash=secret_hash,
                is_verified=True,
                otp=None,
                otp_expires_at=None,
            )
            return True

    def set_code(self, identity_id: str, code: str, expires_at: datetime) -> bool:
        with self._lock:
            identity = self.identities.get(identity_id)
            if identity is None:
                return False
            self.identities[identity_id] = replace(identity, otp=code, otp_expires_at=expires_at)
            return True

    def clear_code(self, identity_id: str, code: str, now: datetime) -> Identity | None:
        with self._lock:
            identity = self.identities.get(identity_id)
            if not self._code_matches(identity, code, now) or not identity.is_verified:
                return None
            updated = replace(identity, otp=None, otp_expires_at=None)
            self.identities[identity_id] = updated
            return updated

    def update_profile(self, identity_id: str, update: ProfileUpdate) -> Identity | None:
        with self._lock:
            identity = self.identities.get(identity_id)
            if identity is None:
                return None
            for other in self.identities.values():
                if other.id != identity_id and (
                    other.email == update.email or other.phone_number == update.phone_number
                ):
                    raise Conflict(identity_id)
            updated = replace(
                identity,
                full_name=update.full_name,
                email=update.email,
                phone_number=update.phone_number,
                address=update.address,
            )
            self.identities[identity_id] = updated
            return updated


class FakeDataRequestRepository:
    def __init__(self) -> None:
        self.requests: list[DataRequest] = []

    def add(self, request: DataRequest) -> None:
        self.requests.append(request)

    def list_recent(self) -> list[DataRequest]:
        return list(reversed(self.requests))


class FakeReportRepository:
    """Stores reports in lists; filers must exist in the identity fake."""

    def __init__(self, identities: FakeIdentityRepository) -> None:
        self._identities = identities
        self.grievances: list[GrievanceReport] = []
        self.suspicious_entities: list[SuspiciousEntityReport] = []

    def _require_filer(self, user_id: str) -> None:
        if self._identities.find_by_id(user_id) is None:
            raise NotFound(user_id)

    def add_grievance(self, report: GrievanceReport) -> None:
        self._require_filer(report.user_id)
        self.grievances.append(report)

    def add_suspicious_entity(self, report: SuspiciousEntityReport) -> None:
        self._require_filer(report.user_id)
        self.suspicious_entities.append(report)


def new_identity(**overrides: object) -> NewIdentity:
    """Build a valid identity claim, overriding any field."""
    fields = {
        "full_name": "Asha Verma",
        "aadhaar_number": "123456789012",
        "phone_number": "+919876543210",
        "email": "asha@example.com",
        "address": "12 MG Road, Bengaluru",
        "role": Role.USER,
    }
    fields.update(overrides)
    return NewIdentity(**fields)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def code_sender() -> RecordingCodeSender:
    return RecordingCodeSender()


@pytest.fixture
def fake_repository() -> FakeIdentityRepository:
    return FakeIdentityRepository()


@pytest.fixture
def token_issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer(TEST_JWT_SECRET)


@pytest.fixture
def verification_service(
    fake_repository: FakeIdentityRepository,
    code_sender: RecordingCodeSender,
    token_issuer: JwtTokenIssuer,
    clock: MutableClock,
) -> VerificationService:
    """Verification service over in-memory fakes with a controllable clock."""
    return VerificationService(
        repository=fake_repository,
        code_sender=code_sender,
        token_issuer=token_issuer,
        clock=clock,
    )


@pytest.fixture
def identity_factory():
    """Factory for valid NewIdentity claims: identity_factory(email=...)."""
    return new_identity


@pytest.fixture
def data_request_repository() -> FakeDataRequestRepository:
    return FakeDataRequestRepository()


@pytest.fixture
def report_repository(fake_repository: FakeIdentityRepository) -> FakeReportRepository:
    return FakeReportRepository(fake_repository)

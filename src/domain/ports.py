"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain works with and the interfaces
(ports) it requires from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class Role(str, Enum):
    """Role carried by an identity and by its session tokens."""

    USER = "USER"
    OFFICER = "OFFICER"


class VerificationState(str, Enum):
    """
    Verification states of an identity.

    State Transitions:
    - UNVERIFIED -> PENDING_VERIFICATION (registration stores a code)
    - PENDING_VERIFICATION -> VERIFIED (code checked, secret set)
    - VERIFIED -> LOGIN_PENDING_VERIFICATION (login with correct secret stores a code)
    - LOGIN_PENDING_VERIFICATION -> VERIFIED (code checked and cleared, session issued)

    Registration stores the identity and its first code in one statement,
    so UNVERIFIED is only observable if that code was later cleared.
    The state is derived from the stored columns, never persisted on its own.
    """

    UNVERIFIED = "UNVERIFIED"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    VERIFIED = "VERIFIED"
    LOGIN_PENDING_VERIFICATION = "LOGIN_PENDING_VERIFICATION"


@dataclass(frozen=True)
class NewIdentity:
    """Identity claim submitted at registration."""

    full_name: str
    aadhaar_number: str
    phone_number: str
    email: str
    address: str
    role: Role = Role.USER


@dataclass(frozen=True)
class Identity:
    """Stored identity record, including verification columns."""

    id: str
    full_name: str
    aadhaar_number: str
    phone_number: str
    email: str
    address: str
    role: Role
    password_hash: str | None
    is_verified: bool
    otp: str | None
    otp_expires_at: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def state(self) -> VerificationState:
        code_issued = self.otp is not None
        if self.is_verified:
            if code_issued:
                return VerificationState.LOGIN_PENDING_VERIFICATION
            return VerificationState.VERIFIED
        if code_issued:
            return VerificationState.PENDING_VERIFICATION
        return VerificationState.UNVERIFIED

    def public_profile(self) -> dict[str, str]:
        """Profile projection safe to return to clients (no secret, no code)."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "role": self.role.value,
            "aadhaar_number": self.aadhaar_number,
            "address": self.address,
        }

    def officer_profile(self) -> dict[str, str]:
        """Limited projection returned by officer login."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class ProfileUpdate:
    """Contact fields a user may change after registration."""

    full_name: str
    email: str
    phone_number: str
    address: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a session token."""

    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class DataRequest:
    """Officer request for data about a target entity."""

    id: str
    officer_id: str
    request_type: str
    target_entity: str
    justification: str
    urgency: str
    status: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class GrievanceReport:
    """Citizen report of a fraud incident."""

    id: str
    user_id: str
    category: str
    description: str
    subcategory: str | None = None
    location: str | None = None
    anonymous: bool = False
    status: str = "pending"
    priority: str = "medium"
    created_at: datetime | None = None


@dataclass(frozen=True)
class SuspiciousEntityReport:
    """Citizen report of a suspicious phone number, account, site or similar."""

    id: str
    user_id: str
    entity_type: str
    entity_value: str
    description: str
    status: str = "pending"
    created_at: datetime | None = None


class IdentityRepository(Protocol):
    """
    Port interface for identity persistence.

    Every method is a single atomic operation on one identity. Methods taking
    a `code` argument are compare-and-set: they only apply while the stored
    code equals `code` and has not expired at `now`, which makes concurrent
    verification attempts for one identity resolve to exactly one winner.
    """

    def create(
        self, identity_id: str, identity: NewIdentity, code: str, code_expires_at: datetime
    ) -> bool:
        """
        Insert a new identity together with its first one-time code.

        Returns:
            True if inserted, False if national id, email or phone already exist
        """
        ...

    def find_by_id(self, identity_id: str) -> Identity | None:
        """Return the identity or None."""
        ...

    def find_verified_by_id(self, identity_id: str, role: Role | None = None) -> Identity | None:
        """Return the identity only if it is verified (and has `role`, when given)."""
        ...

    def set_secret_and_verify(
        self, identity_id: str, code: str, secret_hash: str, now: datetime
    ) -> bool:
        """
        Consume the code, store the secret hash and mark the identity verified.

        Only applies to an identity that is not verified yet.

        Returns:
            True if this call consumed the code, False otherwise
        """
        ...

    def set_code(self, identity_id: str, code: str, expires_at: datetime) -> bool:
        """Store a code, overwriting any prior one. False if the identity is gone."""
        ...

    def clear_code(self, identity_id: str, code: str, now: datetime) -> Identity | None:
        """
        Consume the code without touching the secret.

        Only applies to a verified identity.

        Returns:
            Updated identity if this call consumed the code, None otherwise
        """
        ...

    def update_profile(self, identity_id: str, update: ProfileUpdate) -> Identity | None:
        """
        Replace contact fields.

        Returns:
            Updated identity, or None if no identity has this id

        Raises:
            Conflict: If the new email or phone number belongs to another identity
        """
        ...


class DataRequestRepository(Protocol):
    """Port interface for officer data request persistence."""

    def add(self, request: DataRequest) -> None:
        ...

    def list_recent(self) -> list[DataRequest]:
        """All requests, newest first."""
        ...


class ReportRepository(Protocol):
    """Port interface for citizen report persistence."""

    def add_grievance(self, report: GrievanceReport) -> None:
        """
        Raises:
            NotFound: If no identity has `report.user_id`
        """
        ...

    def add_suspicious_entity(self, report: SuspiciousEntityReport) -> None:
        """
        Raises:
            NotFound: If no identity has `report.user_id`
        """
        ...


class CodeSender(Protocol):
    """Port interface for one-time code delivery."""

    def send_code(self, destination: str, code: str) -> bool:
        """
        Deliver a one-time code to a phone number or email address.

        Returns:
            True if the delivery channel accepted the code. Never raises.
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for signed session tokens."""

    def issue(self, identity_id: str, role: Role) -> str:
        ...

    def verify(self, token: str) -> TokenClaims:
        """
        Raises:
            Unauthorized: If the token is malformed, tampered with, or expired
        """
        ...


class RateGuard(Protocol):
    """Port interface for request throttling."""

    def check(self, caller: str, route: str) -> None:
        """
        Raises:
            TooManyRequests: If `caller` exceeded its budget for `route`
        """
        ...

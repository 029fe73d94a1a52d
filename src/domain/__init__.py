"""
Domain layer - Pure business logic with zero framework imports.

This package contains the identity verification state machine, the
one-time code issuer, and the profile, report and data request services. It
defines its own port interfaces for infrastructure abstraction.
"""

from .data_requests import DataRequestService
from .exceptions import (
    Conflict,
    IdentityError,
    InvalidOrExpiredCode,
    NotFound,
    SecretTooLong,
    TooManyRequests,
    Unauthorized,
    ValidationError,
)
from .ports import (
    CodeSender,
    DataRequest,
    DataRequestRepository,
    GrievanceReport,
    Identity,
    IdentityRepository,
    NewIdentity,
    ProfileUpdate,
    RateGuard,
    ReportRepository,
    Role,
    SuspiciousEntityReport,
    TokenClaims,
    TokenIssuer,
    VerificationState,
)
from .profiles import ProfileService
from .reports import ReportService
from .verification import LoginChallenge, RegistrationResult, Session, VerificationService

__all__ = [
    "CodeSender",
    "Conflict",
    "DataRequest",
    "DataRequestRepository",
    "DataRequestService",
    "GrievanceReport",
    "Identity",
    "IdentityError",
    "IdentityRepository",
    "InvalidOrExpiredCode",
    "LoginChallenge",
    "NewIdentity",
    "NotFound",
    "ProfileService",
    "ProfileUpdate",
    "RateGuard",
    "RegistrationResult",
    "ReportRepository",
    "ReportService",
    "Role",
    "SecretTooLong",
    "Session",
    "SuspiciousEntityReport",
    "TokenClaims",
    "TokenIssuer",
    "TooManyRequests",
    "Unauthorized",
    "ValidationError",
    "VerificationService",
    "VerificationState",
]

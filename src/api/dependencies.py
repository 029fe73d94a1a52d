"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
and infrastructure adapters into routes. Long-lived collaborators (pool,
token issuer, code sender, rate guard, settings) are created once in the
application lifespan and stored in app.state; services are cheap and
built per request around them.
"""

from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresDataRequestRepository,
    PostgresIdentityRepository,
    PostgresReportRepository,
)
from src.config.settings import Settings
from src.domain.data_requests import DataRequestService
from src.domain.exceptions import TooManyRequests, Unauthorized
from src.domain.ports import CodeSender, RateGuard, Role, TokenClaims, TokenIssuer
from src.domain.profiles import ProfileService
from src.domain.reports import ReportService
from src.domain.verification import VerificationService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_app_settings(request: Request) -> Settings:
    """Settings loaded once at startup."""
    return request.app.state.settings


def get_identity_repository(request: Request) -> PostgresIdentityRepository:
    """Create repository with connection pool from app state."""
    return PostgresIdentityRepository(get_pool(request))


def get_data_request_repository(request: Request) -> PostgresDataRequestRepository:
    return PostgresDataRequestRepository(get_pool(request))


def get_report_repository(request: Request) -> PostgresReportRepository:
    return PostgresReportRepository(get_pool(request))


def get_code_sender(request: Request) -> CodeSender:
    return request.app.state.code_sender


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_rate_guard(request: Request) -> RateGuard:
    return request.app.state.rate_guard


def get_verification_service(request: Request) -> VerificationService:
    """
    Create verification service with injected dependencies.

    Wires together the repository, code sender and token issuer.
    """
    settings = get_app_settings(request)
    return VerificationService(
        repository=get_identity_repository(request),
        code_sender=get_code_sender(request),
        token_issuer=get_token_issuer(request),
        bcrypt_cost=settings.bcrypt_cost,
        code_ttl=timedelta(seconds=settings.otp_ttl_seconds),
    )


def get_profile_service(request: Request) -> ProfileService:
    return ProfileService(repository=get_identity_repository(request))


def get_data_request_service(request: Request) -> DataRequestService:
    return DataRequestService(repository=get_data_request_repository(request))


def get_report_service(request: Request) -> ReportService:
    return ReportService(repository=get_report_repository(request))


def enforce_rate_limit(request: Request, guard: RateGuard = Depends(get_rate_guard)) -> None:
    """
    Consult the rate guard before the route body runs.

    Keyed by client address and route path. Refusal surfaces as 429
    before any state is touched.
    """
    caller = request.client.host if request.client else "unknown"
    try:
        guard.check(caller, request.url.path)
    except TooManyRequests:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
        ) from None


# Bearer token security scheme for OpenAPI documentation
http_bearer = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """
    Verify the bearer session token.

    Missing, tampered and expired tokens all return the same 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return issuer.verify(credentials.credentials)
    except Unauthorized:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


def require_officer(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if claims.role != Role.OFFICER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return claims

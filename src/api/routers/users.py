"""
User profile and report routes.

A session token may read and update its own profile and file reports under
its own id; officer tokens may do so for any user.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_current_claims, get_profile_service, get_report_service
from src.api.models import (
    ErrorResponse,
    GrievanceReportCreate,
    GrievanceReported,
    ProfileUpdateRequest,
    SuspiciousEntityCreate,
    SuspiciousEntityReported,
    UserProfile,
)
from src.domain.exceptions import Conflict, NotFound, ValidationError
from src.domain.ports import ProfileUpdate, Role, TokenClaims
from src.domain.profiles import ProfileService
from src.domain.reports import ReportService

router = APIRouter(
    prefix="/user",
    tags=["user"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Not this user's session"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)


def _authorize(claims: TokenClaims, user_id: str) -> None:
    if claims.subject != user_id and claims.role != Role.OFFICER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")


@router.get("/{user_id}", response_model=UserProfile, summary="Get a user profile")
def get_user(
    user_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    service: ProfileService = Depends(get_profile_service),
) -> UserProfile:
    _authorize(claims, user_id)
    try:
        profile = service.get_profile(user_id)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from None
    return UserProfile(**profile)


@router.patch(
    "/{user_id}/profile",
    response_model=UserProfile,
    responses={409: {"model": ErrorResponse, "description": "Email or phone already in use"}},
    summary="Update contact fields",
)
def update_profile(
    user_id: str,
    request_data: ProfileUpdateRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: ProfileService = Depends(get_profile_service),
) -> UserProfile:
    _authorize(claims, user_id)
    try:
        profile = service.update_profile(
            user_id,
            ProfileUpdate(
                full_name=request_data.full_name,
                email=request_data.email,
                phone_number=request_data.phone_number,
                address=request_data.address,
            ),
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required"
        ) from None
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from None
    except Conflict:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email or phone number already in use"
        ) from None
    return UserProfile(**profile)


@router.post(
    "/{user_id}/report_grievance",
    response_model=GrievanceReported,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing required fields"}},
    summary="File a fraud grievance",
)
def report_grievance(
    user_id: str,
    request_data: GrievanceReportCreate,
    claims: TokenClaims = Depends(get_current_claims),
    service: ReportService = Depends(get_report_service),
) -> GrievanceReported:
    _authorize(claims, user_id)
    try:
        report_id = service.file_grievance(
            user_id,
            category=request_data.category,
            description=request_data.description,
            subcategory=request_data.subcategory,
            location=request_data.location,
            anonymous=request_data.anonymous,
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required"
        ) from None
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from None
    return GrievanceReported(message="Grievance reported successfully", report_id=report_id)


@router.post(
    "/{user_id}/report_suspicious",
    response_model=SuspiciousEntityReported,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing required fields"}},
    summary="Report a suspicious entity",
)
def report_suspicious(
    user_id: str,
    request_data: SuspiciousEntityCreate,
    claims: TokenClaims = Depends(get_current_claims),
    service: ReportService = Depends(get_report_service),
) -> SuspiciousEntityReported:
    _authorize(claims, user_id)
    try:
        entity_id = service.report_suspicious(
            user_id,
            entity_type=request_data.entity_type,
            entity_value=request_data.entity_value,
            description=request_data.description,
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required"
        ) from None
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from None
    return SuspiciousEntityReported(
        message="Suspicious entity reported successfully", entity_id=entity_id
    )

"""
Officer routes.

- POST /officer/login - Password login for verified officers, issues session token
- POST /data-request - File a data request (officer token required)
- GET /data-requests - List data requests, newest first (officer token required)
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import (
    enforce_rate_limit,
    get_data_request_service,
    get_verification_service,
    require_officer,
)
from src.api.models import (
    DataRequestCreate,
    DataRequestCreated,
    DataRequestItem,
    ErrorResponse,
    LoginRequest,
    OfficerSessionResponse,
)
from src.domain.data_requests import DataRequestService
from src.domain.exceptions import Unauthorized, ValidationError
from src.domain.ports import TokenClaims
from src.domain.verification import VerificationService

router = APIRouter(tags=["officer"])


@router.post(
    "/officer/login",
    response_model=OfficerSessionResponse,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
    },
    summary="Officer login",
)
def officer_login(
    request_data: LoginRequest,
    service: VerificationService = Depends(get_verification_service),
) -> OfficerSessionResponse:
    try:
        session = service.officer_login(request_data.user_id, request_data.password)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required"
        ) from None
    except Unauthorized:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from None
    return OfficerSessionResponse(
        message="Officer login successful", token=session.token, user=session.user
    )


@router.post(
    "/data-request",
    response_model=DataRequestCreated,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Not an officer"},
    },
    summary="File a data request",
)
def create_data_request(
    request_data: DataRequestCreate,
    claims: TokenClaims = Depends(require_officer),
    service: DataRequestService = Depends(get_data_request_service),
) -> DataRequestCreated:
    try:
        request_id = service.create(
            officer_id=claims.subject,
            request_type=request_data.request_type,
            target_entity=request_data.target_entity,
            justification=request_data.justification,
            urgency=request_data.urgency,
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required"
        ) from None
    return DataRequestCreated(message="Data request created successfully", request_id=request_id)


@router.get(
    "/data-requests",
    response_model=list[DataRequestItem],
    dependencies=[Depends(require_officer)],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Not an officer"},
    },
    summary="List data requests",
)
def list_data_requests(
    service: DataRequestService = Depends(get_data_request_service),
) -> list[DataRequestItem]:
    return [DataRequestItem(**vars(item)) for item in service.list_requests()]

"""
Citizen authentication routes.

Registration and the two-phase login ceremony:
- POST /auth/register - Store identity, send registration code
- POST /auth/verify-otp - Check registration code, set password
- POST /auth/login - Check password, send login code
- POST /auth/login-verify - Check login code, issue session token
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import enforce_rate_limit, get_verification_service
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginVerifyRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    VerifyOtpRequest,
)
from src.domain.exceptions import (
    Conflict,
    InvalidOrExpiredCode,
    SecretTooLong,
    Unauthorized,
    ValidationError,
)
from src.domain.ports import NewIdentity
from src.domain.verification import VerificationService

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(enforce_rate_limit)],
    responses={429: {"model": ErrorResponse, "description": "Too many requests"}},
)

DELIVERY_WARNING = "OTP delivery could not be confirmed; request a new code if none arrives"


def _missing_fields() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")


def _invalid_code() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired OTP")


@router.post(
    "/register",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or malformed fields"},
        409: {"model": ErrorResponse, "description": "Identity already registered"},
    },
    summary="Register a new identity",
    description="Submit identity details to begin registration. "
    "A 6-digit one-time code is sent to the phone number.",
)
def register(
    request_data: RegisterRequest,
    service: VerificationService = Depends(get_verification_service),
) -> RegisterResponse:
    try:
        result = service.register(
            NewIdentity(
                full_name=request_data.full_name,
                aadhaar_number=request_data.aadhaar_number,
                phone_number=request_data.phone_number,
                email=request_data.email,
                address=request_data.address,
                role=request_data.role,
            )
        )
    except ValidationError:
        raise _missing_fields() from None
    except Conflict:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this Aadhaar, email, or phone number",
        ) from None

    return RegisterResponse(
        message="User registered successfully. OTP sent for verification.",
        user_id=result.identity_id,
        warning=None if result.code_delivered else DELIVERY_WARNING,
    )


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired OTP"}},
    summary="Verify registration code",
    description="Submit the registration code and choose a password. "
    "No session is issued; log in afterwards.",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: VerificationService = Depends(get_verification_service),
) -> MessageResponse:
    try:
        service.verify_registration(request_data.user_id, request_data.otp, request_data.password)
    except SecretTooLong:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Password too long"
        ) from None
    except ValidationError:
        raise _missing_fields() from None
    except InvalidOrExpiredCode:
        raise _invalid_code() from None
    return MessageResponse(message="Account verified successfully")


@router.post(
    "/login",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Start login",
    description="Check the password of a verified identity and send a login code.",
)
def login(
    request_data: LoginRequest,
    service: VerificationService = Depends(get_verification_service),
) -> MessageResponse:
    try:
        challenge = service.login(request_data.user_id, request_data.password)
    except ValidationError:
        raise _missing_fields() from None
    except Unauthorized:
        # Unknown, unverified and wrong password are deliberately identical
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from None
    return MessageResponse(
        message="OTP sent for login verification",
        warning=None if challenge.code_delivered else DELIVERY_WARNING,
    )


@router.post(
    "/login-verify",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired OTP"}},
    summary="Complete login",
    description="Submit the login code to receive a 24-hour session token.",
)
def login_verify(
    request_data: LoginVerifyRequest,
    service: VerificationService = Depends(get_verification_service),
) -> SessionResponse:
    try:
        session = service.verify_login(request_data.user_id, request_data.otp)
    except ValidationError:
        raise _missing_fields() from None
    except InvalidOrExpiredCode:
        raise _invalid_code() from None
    return SessionResponse(message="Login successful", token=session.token, user=session.user)

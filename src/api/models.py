"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models reject unknown fields so a typo never reaches the domain.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.domain.ports import Role


class StrictRequest(BaseModel):
    """Base for request bodies: unknown fields are a validation error."""

    model_config = ConfigDict(extra="forbid")


class RegisterRequest(StrictRequest):
    """Request model for identity registration."""

    full_name: str = Field(..., min_length=1, max_length=255)
    aadhaar_number: str = Field(
        ..., pattern=r"^\d{12}$", description="12-digit Aadhaar number"
    )
    phone_number: str = Field(
        ..., pattern=r"^\+?\d{10,14}$", description="Phone number, optional leading +"
    )
    email: EmailStr
    address: str = Field(..., min_length=1)
    role: Role = Role.USER


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    user_id: str
    warning: str | None = None


class VerifyOtpRequest(StrictRequest):
    """Request model for registration verification."""

    user_id: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1, max_length=6, description="6-digit one-time code")
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(StrictRequest):
    """Request model for citizen and officer login."""

    user_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=72)


class LoginVerifyRequest(StrictRequest):
    """Request model for the second login phase."""

    user_id: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1, max_length=6, description="6-digit one-time code")


class MessageResponse(BaseModel):
    message: str
    warning: str | None = None


class UserProfile(BaseModel):
    """Public profile projection of an identity."""

    id: str
    full_name: str
    email: str
    phone_number: str
    role: Role
    aadhaar_number: str
    address: str


class OfficerProfile(BaseModel):
    """Limited profile returned by officer login."""

    id: str
    full_name: str
    email: str
    role: Role


class SessionResponse(BaseModel):
    """Response model for successful login verification."""

    message: str
    token: str
    user: UserProfile


class OfficerSessionResponse(BaseModel):
    message: str
    token: str
    user: OfficerProfile


class ProfileUpdateRequest(StrictRequest):
    """Request model for contact field updates."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str = Field(..., pattern=r"^\+?\d{10,14}$")
    address: str = Field(..., min_length=1)


class DataRequestCreate(StrictRequest):
    """Request model for an officer data request."""

    request_type: str = Field(..., min_length=1, max_length=100)
    target_entity: str = Field(..., min_length=1, max_length=255)
    justification: str = Field(..., min_length=1)
    urgency: Literal["low", "medium", "high"] = "medium"


class DataRequestCreated(BaseModel):
    message: str
    request_id: str


class DataRequestItem(BaseModel):
    id: str
    officer_id: str
    request_type: str
    target_entity: str
    justification: str
    urgency: str
    status: str
    created_at: datetime | None = None


class GrievanceReportCreate(StrictRequest):
    """Request model for a citizen grievance. Text fields only."""

    category: str = Field(..., min_length=1, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    description: str = Field(..., min_length=1)
    location: str | None = Field(None, max_length=255)
    anonymous: bool = False


class GrievanceReported(BaseModel):
    message: str
    report_id: str


class SuspiciousEntityCreate(StrictRequest):
    """Request model for a suspicious phone number, account, site and the like."""

    entity_type: str = Field(..., min_length=1, max_length=50)
    entity_value: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class SuspiciousEntityReported(BaseModel):
    message: str
    entity_id: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str

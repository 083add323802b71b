"""
API request and response models for Vendorify REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
vendors/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models default every field to "" so a missing field reaches the
route handler, which answers with the specific 400 message for that form.
Type errors (e.g. a number where a string belongs) still fail pydantic
validation and are mapped to a generic 400 by api/main.py.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from vendors.models import Document, VendorApplication

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/auth/signup."""

    name: Optional[str] = Field(default="", max_length=255)
    email: Optional[str] = Field(default="", max_length=255)
    # Not stripped: leading/trailing spaces are part of the password.
    password: Optional[str] = Field(default="", max_length=128)

    @field_validator("name", mode="after")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> str:
        return (value or "").strip()

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> str:
        """Trim and lowercase so "A@X.com" and "a@x.com" are one account."""
        return (value or "").strip().lower()


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = Field(default="", max_length=255)
    password: Optional[str] = Field(default="", max_length=128)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> str:
        return (value or "").strip().lower()


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(**user.public_fields())


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Vendors
# ---------------------------------------------------------------------------


class VendorApplicationCreate(BaseModel):
    """Request body for POST /api/vendors."""

    model_config = ConfigDict(str_strip_whitespace=True)

    vendor_name: Optional[str] = Field(default="", max_length=255)
    stall_type: Optional[str] = Field(default="", max_length=50)
    license_number: Optional[str] = Field(default="", max_length=100)


class VendorApplicationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    vendor_name: str
    stall_type: str
    license_number: str
    status: str
    created_at: str

    @classmethod
    def from_application(cls, application: VendorApplication) -> "VendorApplicationResponse":
        """Factory Method -- the mapping lives with the output model, not in route handlers."""
        return cls(
            id=application.id,
            user_id=application.user_id,
            vendor_name=application.vendor_name,
            stall_type=application.stall_type,
            license_number=application.license_number,
            status=application.status,
            created_at=application.created_at,
        )


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


class DocumentResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    file_name: str
    file_url: str
    content_type: str
    size_bytes: int
    uploaded_at: str

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            file_name=document.file_name,
            file_url=document.file_url,
            content_type=document.content_type,
            size_bytes=document.size_bytes,
            uploaded_at=document.uploaded_at,
        )


class UploadResponse(BaseModel):
    """Response for POST /api/upload."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    file_name: str
    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx JSON response."""

    model_config = ConfigDict(frozen=True)

    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str

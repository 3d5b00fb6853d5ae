# app/schemas/auth.py
"""
Pydantic schemas for authentication and profile endpoints.
"""
from typing import Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

__all__ = ["RegisterIn", "LoginIn", "ProfileUpdateIn", "PROFILE_FIELD_MAP"]

# API (camelCase) name -> User column
PROFILE_FIELD_MAP = {
    "businessName": "business_name",
    "fullName": "full_name",
    "phoneNumber": "phone_number",
    "address": "address",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "country": "country",
    "logoUrl": "logo_url",
    "businessType": "business_type",
    "theme": "theme",
}


def _check_email(v: str) -> str:
    """Reject malformed addresses but keep the value exactly as submitted."""
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return v

class RegisterIn(BaseModel):
    """
    Request model for registration.
    Profile fields are optional and can be filled in later via PATCH /auth/profile.
    """
    email: str  # Login key, stored as given
    password: str = Field(min_length=6)  # Plain text, hashed server-side
    businessName: Optional[str] = None
    fullName: Optional[str] = None
    phoneNumber: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

class LoginIn(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _check_email(v)

class ProfileUpdateIn(BaseModel):
    """
    Request model for profile updates.
    All fields are optional - only provided fields are changed. Email and
    password are not part of the profile and cannot be changed here.
    """
    businessName: Optional[str] = None
    fullName: Optional[str] = None
    phoneNumber: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None
    logoUrl: Optional[str] = None
    businessType: Optional[str] = None
    theme: Optional[str] = None

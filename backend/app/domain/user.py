"""
User and account domain models

Author: DP Team
Date: 2025-06-02
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.domain.base import DomainModel

MIN_PASSWORD_LENGTH = 8

# Fields that must be filled before checkout is allowed
PROFILE_REQUIRED_FIELDS = ("name", "phone", "address", "city", "postal_code", "country", "profession")


class User(DomainModel):
    """Public view of an account (never includes the password hash or reset token)"""
    id: int
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    is_active: bool = True

    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    profession: Optional[str] = None
    workplace: Optional[str] = None
    is_profile_complete: bool = False

    created_at: Optional[datetime] = None


class Salesman(User):
    cnic: Optional[str] = None
    gender: Optional[str] = None
    granter_name: Optional[str] = None
    granter_phone: Optional[str] = None


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class VerifyResetTokenRequest(BaseModel):
    email: str
    code: str


class ResetPasswordRequest(BaseModel):
    email: str
    code: str
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    profession: Optional[str] = None
    workplace: Optional[str] = None


class SalesmanImageUpdate(BaseModel):
    """Salesmen may only change their picture; the rest is managed by an admin"""
    image: Optional[str] = None


class SalesmanCreate(BaseModel):
    email: EmailStr
    password: str
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    cnic: Optional[str] = None
    gender: Optional[str] = None
    granter_name: Optional[str] = None
    granter_phone: Optional[str] = None


class SalesmanUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    cnic: Optional[str] = None
    gender: Optional[str] = None
    granter_name: Optional[str] = None
    granter_phone: Optional[str] = None
    is_active: Optional[bool] = None


def is_profile_complete(user) -> bool:
    """Check that every required profile field has a non-blank value"""
    for field in PROFILE_REQUIRED_FIELDS:
        value = getattr(user, field, None)
        if value is None or not str(value).strip():
            return False
    return True


def password_error(password: Optional[str]) -> Optional[str]:
    """Message describing why a password is unacceptable, None when it is fine"""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None

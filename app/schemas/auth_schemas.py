"""Authentication and user schemas"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from app.utils.clock import as_utc


class CamelModel(BaseModel):
    """Wire format is camelCase; Python attributes stay snake_case"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def normalize_email(value):
    """Emails are case-insensitive: trim and lower-case before validation"""
    if isinstance(value, str):
        return value.strip().lower()
    return value


def validate_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError('Name must be at least 2 characters long')
    if len(value) > 50:
        raise ValueError('Name cannot exceed 50 characters')
    return value


def validate_date_of_birth(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError('Date of birth is required')
    return value


def validate_password_strength(value: str) -> str:
    """Validate password strength"""
    if len(value) < 8:
        raise ValueError('Password must be at least 8 characters long')
    if not any(char.isdigit() for char in value):
        raise ValueError('Password must contain at least one digit')
    if not any(char.isupper() for char in value):
        raise ValueError('Password must contain at least one uppercase letter')
    if not any(char.islower() for char in value):
        raise ValueError('Password must contain at least one lowercase letter')
    return value


class EmailRequest(CamelModel):
    """Base for any request keyed by email"""
    email: EmailStr

    @field_validator('email', mode='before')
    @classmethod
    def _normalize_email(cls, v):
        return normalize_email(v)


class SignupRequest(EmailRequest):
    """Email-flow signup"""
    name: str = Field(..., max_length=200)
    date_of_birth: str = Field(..., max_length=32)
    password: str = Field(..., max_length=100)

    @field_validator('name')
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return validate_name(v)

    @field_validator('date_of_birth')
    @classmethod
    def _validate_date_of_birth(cls, v: str) -> str:
        return validate_date_of_birth(v)

    @field_validator('password')
    @classmethod
    def _validate_password(cls, v: str) -> str:
        return validate_password_strength(v)


class SigninRequest(EmailRequest):
    password: str = Field(..., min_length=1, max_length=100)


class OTPRequest(EmailRequest):
    pass


class OTPVerifyRequest(EmailRequest):
    otp: str = Field(..., min_length=1, max_length=12)

    @field_validator('otp')
    @classmethod
    def _strip_otp(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('OTP is required')
        return v


class GoogleSigninRequest(CamelModel):
    """Google ID token from the frontend Google Sign-In button"""
    google_token: str = Field(..., min_length=1, description="Google ID token obtained from frontend Google Sign-In")


class GoogleSignupRequest(GoogleSigninRequest):
    date_of_birth: str = Field(..., max_length=32)

    @field_validator('date_of_birth')
    @classmethod
    def _validate_date_of_birth(cls, v: str) -> str:
        return validate_date_of_birth(v)


class UserSummary(CamelModel):
    """Sanitized user projection returned alongside a session token"""
    id: str
    name: str
    email: str
    is_email_verified: bool
    last_login: Optional[datetime] = None

    @field_validator('last_login')
    @classmethod
    def _last_login_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class UserProfile(UserSummary):
    """Full profile; never carries password or OTP fields"""
    date_of_birth: str
    auth_method: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('created_at', 'updated_at')
    @classmethod
    def _timestamps_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class SignupResult(CamelModel):
    user_id: str
    email: str
    is_email_verified: bool


class AuthResult(CamelModel):
    """Token response schema"""
    token: str
    user: UserSummary


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[str] = Field(None, max_length=32)

    @field_validator('name')
    @classmethod
    def _validate_name(cls, v: Optional[str]) -> Optional[str]:
        return validate_name(v) if v is not None else v

    @field_validator('date_of_birth')
    @classmethod
    def _validate_date_of_birth(cls, v: Optional[str]) -> Optional[str]:
        return validate_date_of_birth(v) if v is not None else v

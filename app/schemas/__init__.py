"""Pydantic schemas for request/response validation"""
from app.schemas.auth_schemas import (
    CamelModel,
    SignupRequest,
    SigninRequest,
    OTPRequest,
    OTPVerifyRequest,
    GoogleSigninRequest,
    GoogleSignupRequest,
    UserSummary,
    UserProfile,
    SignupResult,
    AuthResult,
    ProfileUpdateRequest
)
from app.schemas.note_schemas import (
    NoteCreate,
    NoteUpdate,
    NoteResponse
)

__all__ = [
    "CamelModel",
    "SignupRequest",
    "SigninRequest",
    "OTPRequest",
    "OTPVerifyRequest",
    "GoogleSigninRequest",
    "GoogleSignupRequest",
    "UserSummary",
    "UserProfile",
    "SignupResult",
    "AuthResult",
    "ProfileUpdateRequest",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse"
]

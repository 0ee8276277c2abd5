"""Custom exceptions for error handling"""
from typing import List, Optional

from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """Base exception class for all custom HTTP exceptions"""
    def __init__(self, detail: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.detail,
            headers=headers
        )


class BadRequestException(BaseHTTPException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"


class UnauthorizedException(BaseHTTPException):
    """401 Unauthorized"""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"

    def __init__(self, detail: str = None):
        super().__init__(
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class NotFoundException(BaseHTTPException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"


class InternalServerException(BaseHTTPException):
    """500 Internal Server Error"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"


class ValidationException(BadRequestException):
    """400 Validation Error, optionally carrying field-level messages"""
    detail = "Validation error"

    def __init__(self, detail: str = None, errors: Optional[List[dict]] = None):
        super().__init__(detail=detail)
        self.errors = errors or []


class DuplicateAccountException(BadRequestException):
    """Signup against an email (or Google identity) that is already registered"""
    detail = "User with this email already exists"


class InvalidOrExpiredCodeException(BadRequestException):
    """OTP mismatch, expiry, or no live code"""
    detail = "Invalid or expired OTP"


class NoSuchAccountException(BadRequestException):
    """Google sign-in for an identity with no Google-mode account"""
    detail = "No account found for this Google identity. Please sign up first."


class InvalidGoogleTokenException(UnauthorizedException):
    """Google ID token failed signature, audience or expiry checks"""
    detail = "Invalid Google token"


class ExternalServiceException(InternalServerException):
    """Identity provider or mail transport failed"""
    detail = "External service failure"


class EmailDeliveryException(ExternalServiceException):
    """OTP email could not be sent"""
    detail = "Failed to send OTP email"

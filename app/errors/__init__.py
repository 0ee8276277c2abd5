"""Error handling module"""
from app.errors.exceptions import (
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
    InternalServerException,
    ValidationException,
    DuplicateAccountException,
    InvalidOrExpiredCodeException,
    NoSuchAccountException,
    InvalidGoogleTokenException,
    ExternalServiceException,
    EmailDeliveryException
)
from app.errors.response_codes import (
    SuccessCode,
    ErrorCode,
    success_response,
    error_response,
    paginated_response
)

__all__ = [
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    "InternalServerException",
    "ValidationException",
    "DuplicateAccountException",
    "InvalidOrExpiredCodeException",
    "NoSuchAccountException",
    "InvalidGoogleTokenException",
    "ExternalServiceException",
    "EmailDeliveryException",
    "SuccessCode",
    "ErrorCode",
    "success_response",
    "error_response",
    "paginated_response"
]

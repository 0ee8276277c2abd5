"""
HTTP Response Codes and Messages
Centralized response handling for consistent API responses
"""
from typing import Any, Dict, List, Optional
from fastapi import status


class ResponseCode:
    """HTTP Response Code Container"""
    def __init__(self, code: int, message: str, status_code: int):
        self.code = code
        self.message = message
        self.status_code = status_code


class SuccessCode:
    """Success Response Codes (2xx)"""

    OK = ResponseCode(
        code=200,
        message="Request processed successfully",
        status_code=status.HTTP_200_OK
    )

    RETRIEVED = ResponseCode(
        code=2001,
        message="Data retrieved successfully",
        status_code=status.HTTP_200_OK
    )

    UPDATED = ResponseCode(
        code=2002,
        message="Resource updated successfully",
        status_code=status.HTTP_200_OK
    )

    DELETED = ResponseCode(
        code=2003,
        message="Resource deleted successfully",
        status_code=status.HTTP_200_OK
    )

    SIGNED_IN = ResponseCode(
        code=2004,
        message="Signin successful",
        status_code=status.HTTP_200_OK
    )

    OTP_SENT = ResponseCode(
        code=2005,
        message="OTP sent successfully to your email",
        status_code=status.HTTP_200_OK
    )

    OTP_VERIFIED = ResponseCode(
        code=2006,
        message="OTP verified successfully",
        status_code=status.HTTP_200_OK
    )

    LOGGED_OUT = ResponseCode(
        code=2007,
        message="Logout successful",
        status_code=status.HTTP_200_OK
    )

    CREATED = ResponseCode(
        code=201,
        message="Resource created successfully",
        status_code=status.HTTP_201_CREATED
    )

    USER_REGISTERED = ResponseCode(
        code=2011,
        message="User registered successfully. Please check your email for OTP.",
        status_code=status.HTTP_201_CREATED
    )

    NOTE_CREATED = ResponseCode(
        code=2012,
        message="Note created successfully",
        status_code=status.HTTP_201_CREATED
    )


class ErrorCode:
    """Error Response Codes (4xx, 5xx)"""

    BAD_REQUEST = ResponseCode(
        code=400,
        message="Bad request",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    VALIDATION_ERROR = ResponseCode(
        code=4001,
        message="Validation error",
        status_code=status.HTTP_400_BAD_REQUEST
    )

    UNAUTHORIZED = ResponseCode(
        code=401,
        message="Authentication required",
        status_code=status.HTTP_401_UNAUTHORIZED
    )

    NOT_FOUND = ResponseCode(
        code=404,
        message="Resource not found",
        status_code=status.HTTP_404_NOT_FOUND
    )

    INTERNAL_ERROR = ResponseCode(
        code=500,
        message="Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    DATABASE_ERROR = ResponseCode(
        code=5001,
        message="Database operation failed",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    EXTERNAL_SERVICE_ERROR = ResponseCode(
        code=5004,
        message="External service call failed",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    @classmethod
    def for_status(cls, status_code: int) -> ResponseCode:
        """Pick the generic code for an HTTP status"""
        known = {
            status.HTTP_400_BAD_REQUEST: cls.BAD_REQUEST,
            status.HTTP_401_UNAUTHORIZED: cls.UNAUTHORIZED,
            status.HTTP_404_NOT_FOUND: cls.NOT_FOUND,
        }
        if status_code in known:
            return known[status_code]
        if status_code >= 500:
            return cls.INTERNAL_ERROR
        return ResponseCode(code=status_code, message="Request failed", status_code=status_code)


def success_response(
    code: ResponseCode = SuccessCode.OK,
    data: Any = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized success response

    Args:
        code: ResponseCode object
        data: Response data, omitted from the envelope when None
        message: Optional custom message

    Returns:
        Standardized response dictionary
    """
    response = {
        "success": True,
        "code": code.code,
        "message": message or code.message,
    }
    if data is not None:
        response["data"] = data
    return response


def error_response(
    code: ResponseCode = ErrorCode.INTERNAL_ERROR,
    message: Optional[str] = None,
    errors: Optional[List[Dict[str, Any]]] = None,
    error: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response

    Args:
        code: ResponseCode object
        message: Optional custom message
        errors: Optional field-level validation errors
        error: Optional internal detail (non-production only)

    Returns:
        Standardized error response dictionary
    """
    response = {
        "success": False,
        "code": code.code,
        "message": message or code.message
    }

    if errors:
        response["errors"] = errors
    if error:
        response["error"] = error

    return response


def paginated_response(
    items_key: str,
    items: list,
    total: int,
    page: int,
    page_size: int,
    code: ResponseCode = SuccessCode.RETRIEVED,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized paginated response

    The items and the pagination block both live under ``data`` so the
    SPA reads ``data.<items_key>`` and ``data.pagination``.
    """
    total_pages = (total + page_size - 1) // page_size

    return success_response(
        code=code,
        message=message,
        data={
            items_key: items,
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                f"total{items_key[:1].upper()}{items_key[1:]}": total,
                "hasNextPage": page * page_size < total,
                "hasPrevPage": page > 1,
            },
        },
    )

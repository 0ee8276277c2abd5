"""Error handlers for the application"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.errors.exceptions import ValidationException, ExternalServiceException
from app.errors.response_codes import ErrorCode, error_response

logger = logging.getLogger(__name__)


def _internal_detail(exc: Exception):
    """Internal error text is only exposed outside production"""
    return None if settings.is_production else str(exc)


def _field_name(loc) -> str:
    # Drop the leading "body"/"query" marker FastAPI adds
    parts = [str(x) for x in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return " -> ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors as 400 with field-level messages
    """
    errors = []
    for error in exc.errors():
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({
            "field": _field_name(error["loc"]),
            "message": message,
            "type": error["type"]
        })

    logger.warning(f"Validation error on {request.url}: {errors}")

    first_message = errors[0]["message"] if errors else None
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(ErrorCode.VALIDATION_ERROR, message=first_message, errors=errors)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render HTTP exceptions (including our custom ones) in the response envelope
    """
    code = ErrorCode.for_status(exc.status_code)
    errors = exc.errors if isinstance(exc, ValidationException) else None
    if isinstance(exc, ValidationException):
        code = ErrorCode.VALIDATION_ERROR
    elif isinstance(exc, ExternalServiceException):
        code = ErrorCode.EXTERNAL_SERVICE_ERROR

    if exc.status_code >= 500:
        logger.error(f"Server error on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code, message=str(exc.detail), errors=errors),
        headers=getattr(exc, "headers", None)
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Handle SQLAlchemy database errors
    """
    logger.error(f"Database error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(ErrorCode.DATABASE_ERROR, error=_internal_detail(exc))
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle general exceptions
    """
    logger.error(f"Unhandled exception on {request.url}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            ErrorCode.INTERNAL_ERROR,
            message="Something went wrong!",
            error=_internal_detail(exc) or "Internal server error"
        )
    )

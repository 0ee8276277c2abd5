"""Main FastAPI application"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.utils.logger import setup_file_logging
from app.api.api import api_router
from app.db.init_db import init_db
from app.services.auth_service import build_auth_components
from app.errors.handlers import (
    validation_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    general_exception_handler
)

setup_file_logging(
    getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    log_file=settings.LOG_FILE,
    to_file=settings.LOG_TO_FILE,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Personal notes with email OTP, password and Google sign-in",
    version=settings.PROJECT_VERSION,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

# Built once; routes receive these through dependencies
app.state.auth_components = build_auth_components(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
def health():
    return {"status": "OK", "message": "Server is running"}


@app.on_event("startup")
async def startup_event():
    """Create tables and log application startup"""
    init_db()
    if not settings.GOOGLE_CLIENT_ID:
        logger.warning("GOOGLE_CLIENT_ID is not set; Google sign-in is disabled")
    logger.warning(f"{settings.PROJECT_NAME} STARTED ({settings.ENVIRONMENT})")


@app.on_event("shutdown")
async def shutdown_event():
    """Log application shutdown"""
    logger.warning(f"{settings.PROJECT_NAME} SHUTDOWN")

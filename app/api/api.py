"""API router aggregation"""
from fastapi import APIRouter
from app.api.endpoints import auth_endpoints, user_endpoints, note_endpoints

api_router = APIRouter()

api_router.include_router(auth_endpoints.router, prefix="/auth",  tags=["Authentication"])
api_router.include_router(user_endpoints.router, prefix="/user",  tags=["User"])
api_router.include_router(note_endpoints.router, prefix="/notes", tags=["Notes"])

"""FastAPI dependencies"""
from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.auth_service import AuthComponents, AuthService
from app.services.user_repository import UserRepository


def get_db() -> Generator:
    """
    Database session dependency
    Yields a database session and ensures it's closed after use
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_auth_components(request: Request) -> AuthComponents:
    """Collaborators built at startup (see app.main)"""
    return request.app.state.auth_components


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    components: AuthComponents = Depends(get_auth_components),
) -> AuthService:
    return AuthService(users, components)

"""Authentication dependencies for bearer-token routes"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.dependencies import get_auth_components, get_auth_service
from app.errors.exceptions import UnauthorizedException
from app.models.user import User
from app.services.auth_service import AuthComponents, AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Extract the token from ``Authorization: Bearer <token>``"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException(detail="Access token required")
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_bearer_token),
    components: AuthComponents = Depends(get_auth_components),
) -> str:
    """Signature and expiry check only; no database access"""
    return components.sessions.authenticate(token)


def get_current_user(
    token: str = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Get the active user behind the bearer token"""
    return auth.current_user(token)

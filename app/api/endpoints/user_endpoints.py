"""Profile endpoints for the signed-in user"""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_user_repository
from app.errors.response_codes import SuccessCode, success_response
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import ProfileUpdateRequest, UserProfile
from app.services.user_repository import UserRepository
from app.services.user_service import delete_account, update_profile

router = APIRouter()


def _profile(user: User) -> dict:
    return {"user": UserProfile.model_validate(user).model_dump(by_alias=True, mode="json")}


@router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile"""
    return success_response(SuccessCode.RETRIEVED, data=_profile(current_user))


@router.put("/profile")
def put_profile(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """
    ## Update name and/or date of birth

    - 400 → "No fields to update" when the body has neither field
    """
    user = update_profile(users, current_user, body)
    return success_response(SuccessCode.UPDATED, message="Profile updated successfully", data=_profile(user))


@router.delete("/profile")
def delete_profile(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """
    ## Delete the account

    All of the user's notes are deleted with it. Tokens already issued keep
    verifying until they expire but no longer resolve to a user.
    """
    delete_account(users, current_user)
    return success_response(SuccessCode.DELETED, message="Account deleted successfully")

"""Profile operations for the signed-in user"""
from app.errors.exceptions import NotFoundException, ValidationException
from app.models.user import User
from app.schemas.auth_schemas import ProfileUpdateRequest
from app.services.user_repository import UserRepository
from app.utils.logger import log_auth_event


def update_profile(users: UserRepository, user: User, data: ProfileUpdateRequest) -> User:
    """
    Update name and/or date of birth. Email and auth method are immutable.
    """
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationException(detail="No fields to update")

    for field_name, value in changes.items():
        setattr(user, field_name, value)
    return users.save(user)


def delete_account(users: UserRepository, user: User) -> None:
    """
    Delete the account and, with it, every note the user owns
    """
    user_id, email = user.id, user.email
    if not users.delete_by_id(user_id):
        raise NotFoundException(detail="User not found")
    log_auth_event("ACCOUNT DELETED", user_id, email)

"""Credential store: persistence for User rows"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.note import Note, NoteTag
from app.models.user import User

logger = logging.getLogger(__name__)


class DuplicateKeyError(Exception):
    """Insert collided with the unique email or google_id index"""


class UserRepository:
    """
    find_by_email / find_by_id / find_by_google_id / insert / save / delete_by_id.

    Uniqueness of email and google_id is enforced by the database; a
    colliding insert surfaces as DuplicateKeyError for callers to translate.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_google_id(self, google_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.google_id == google_id).first()

    def insert(self, user: User) -> User:
        user.email = user.email.strip().lower()
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info(f"Duplicate key on user insert for {user.email}")
            raise DuplicateKeyError(str(exc.orig)) from exc
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_by_id(self, user_id: str) -> bool:
        """Delete the user and every note they own"""
        user = self.find_by_id(user_id)
        if user is None:
            return False
        # Explicit so the cascade holds even where the backend ignores FK actions
        owned_notes = select(Note.id).where(Note.user_id == user_id)
        self.db.query(NoteTag).filter(NoteTag.note_id.in_(owned_notes)).delete(synchronize_session="fetch")
        self.db.query(Note).filter(Note.user_id == user_id).delete(synchronize_session="fetch")
        self.db.delete(user)
        self.db.commit()
        return True

"""User model - the credential store for email and Google identities"""
import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class AuthMethod(str, Enum):
    """How an account proves identity. Fixed at creation."""
    EMAIL = "email"
    GOOGLE = "google"


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    One row per distinct (lower-cased) email.

    State is implicit in the row:
    - pending verification: otp set, is_email_verified False
    - verified: is_email_verified True
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    date_of_birth = Column(String(32), nullable=False)

    auth_method = Column(String(16), nullable=False, default=AuthMethod.EMAIL.value)
    hashed_password = Column(String(255), nullable=True)  # email accounts only

    # Google identity
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    google_email = Column(String(255), nullable=True)

    # Live one-time code, cleared once consumed or expired
    otp = Column(String(12), nullable=True)
    otp_expiry = Column(DateTime(timezone=True), nullable=True)

    is_email_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    notes = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', auth_method='{self.auth_method}')>"

    @property
    def is_google_account(self) -> bool:
        return self.auth_method == AuthMethod.GOOGLE.value

    @property
    def has_pending_otp(self) -> bool:
        return bool(self.otp) and self.otp_expiry is not None

"""Password hashing behind a small capability interface"""
from typing import Optional

from passlib.context import CryptContext


class PasswordHasher:
    """
    hash(plaintext) -> digest, verify(plaintext, digest) -> bool.

    The scheme lives entirely in the CryptContext, so swapping bcrypt for
    another adaptive hash does not touch the auth flows.
    """

    def __init__(self, rounds: int = 12, schemes=("bcrypt",)):
        self._context = CryptContext(
            schemes=list(schemes),
            deprecated="auto",
            bcrypt__rounds=rounds
        )

    def hash(self, plain_password: str) -> str:
        return self._context.hash(plain_password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False  # Google accounts have no password
        try:
            return self._context.verify(plain_password, hashed_password)
        except ValueError:
            # Unrecognised or corrupt digest
            return False

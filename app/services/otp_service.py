"""One-time passcode engine"""
import logging
import secrets
from datetime import timedelta
from typing import Optional

from app.models.user import User
from app.utils.clock import Clock, as_utc, utcnow

logger = logging.getLogger(__name__)


class OTPEngine:
    """
    Issues and checks numeric one-time codes stored on the user row.

    The engine only mutates the ``User``; the caller persists it. At most one
    code is live per user: issuing overwrites whatever was there.
    """

    def __init__(self, expire_minutes: int = 10, length: int = 6, clock: Optional[Clock] = None):
        if length < 1:
            raise ValueError("OTP length must be positive")
        self.ttl = timedelta(minutes=expire_minutes)
        self.length = length
        self._clock = clock or utcnow

    def generate(self) -> str:
        """Uniform over [10**(n-1), 10**n - 1], so never a leading zero"""
        low = 10 ** (self.length - 1)
        return str(low + secrets.randbelow(9 * low))

    def issue(self, user: User) -> str:
        code = self.generate()
        user.otp = code
        user.otp_expiry = self._clock() + self.ttl
        return code

    def clear(self, user: User) -> None:
        user.otp = None
        user.otp_expiry = None

    def is_expired(self, user: User) -> bool:
        expiry = as_utc(user.otp_expiry)
        return expiry is None or self._clock() >= expiry

    def verify(self, user: User, candidate: str) -> bool:
        """
        True exactly once per issued code.

        - no code: False
        - expired: clear the code, False
        - mismatch: keep the code so the user can retry, False
        - match: clear the code, mark the email verified, True
        """
        if not user.has_pending_otp:
            return False

        if self.is_expired(user):
            logger.info("Expired OTP presented; clearing it")
            self.clear(user)
            return False

        if not secrets.compare_digest(user.otp.encode("utf-8"), candidate.encode("utf-8")):
            return False

        self.clear(user)
        user.is_email_verified = True
        return True

"""Stateless session tokens (signed JWT)"""
import logging
from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt

from app.errors.exceptions import UnauthorizedException
from app.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


class SessionIssuer:
    """
    Mints and checks bearer tokens bound to one user id.

    Validity depends only on signature and expiry; there is no server-side
    revocation, so logout is a client-side concern.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Optional[Clock] = None,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or utcnow

    def _now_ts(self) -> int:
        return int(self._clock().timestamp())

    def issue(self, user_id: str) -> str:
        issued_at = self._now_ts()
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def authenticate(self, token: Optional[str]) -> str:
        """
        Return the user id carried by *token*.

        Every failure (missing, malformed, bad signature, expired) raises the
        same UnauthorizedException.
        """
        if not token:
            raise UnauthorizedException(detail="Access token required")

        try:
            # Expiry is checked below against our own clock
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.info(f"Rejected session token: {str(e)}")
            raise UnauthorizedException(detail="Invalid or expired token")

        user_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not user_id or not isinstance(expires_at, int):
            raise UnauthorizedException(detail="Invalid or expired token")

        if self._now_ts() > expires_at:
            raise UnauthorizedException(detail="Invalid or expired token")

        return user_id

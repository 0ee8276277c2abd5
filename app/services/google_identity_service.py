"""Google ID token verification"""
import logging
from dataclasses import dataclass
from typing import Optional

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from app.errors.exceptions import (
    BadRequestException,
    ExternalServiceException,
    InvalidGoogleTokenException,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims we rely on after Google has vouched for the token"""
    subject_id: str
    email: str
    display_name: Optional[str]
    email_verified: bool


class GoogleIdentityVerifier:
    """
    Checks signature, audience and expiry through google-auth and hands back
    the verified claims. Never returns an identity for a bad token.
    """

    def __init__(self, client_id: str, request: Optional[google_requests.Request] = None):
        self.client_id = client_id
        self._request = request

    @property
    def configured(self) -> bool:
        return bool(self.client_id)

    def _transport(self) -> google_requests.Request:
        if self._request is None:
            self._request = google_requests.Request()
        return self._request

    def verify(self, token: str) -> GoogleIdentity:
        if not self.configured:
            raise BadRequestException(detail="Google Sign-In is not configured on this server.")

        try:
            idinfo = google_id_token.verify_oauth2_token(token, self._transport(), self.client_id)
        except google_exceptions.TransportError as exc:
            logger.error(f"Google certificate fetch failed: {exc}")
            raise ExternalServiceException(detail="Could not reach Google to verify the token")
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            logger.info(f"Rejected Google ID token: {exc}")
            raise InvalidGoogleTokenException(detail="Invalid Google token")

        subject_id = idinfo.get("sub")
        email = idinfo.get("email")
        if not subject_id or not email:
            raise InvalidGoogleTokenException(detail="Google token is missing the account id or email")

        return GoogleIdentity(
            subject_id=subject_id,
            email=email.strip().lower(),
            display_name=idinfo.get("name"),
            email_verified=bool(idinfo.get("email_verified", False)),
        )

"""Authentication orchestration: signup, OTP, password and Google flows"""
import logging
import secrets
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from app.errors.exceptions import (
    DuplicateAccountException,
    EmailDeliveryException,
    InvalidOrExpiredCodeException,
    NoSuchAccountException,
    NotFoundException,
    UnauthorizedException,
)
from app.models.user import AuthMethod, User
from app.schemas.auth_schemas import SignupRequest
from app.services.google_identity_service import GoogleIdentity, GoogleIdentityVerifier
from app.services.otp_service import OTPEngine
from app.services.password_service import PasswordHasher
from app.services.session_service import SessionIssuer
from app.services.user_repository import DuplicateKeyError, UserRepository
from app.utils.clock import Clock, utcnow
from app.utils.email import Mailer, build_mailer
from app.utils.locks import KeyedLock
from app.utils.logger import log_auth_event

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Account is deactivated"


@dataclass
class AuthComponents:
    """Collaborators built once at startup and shared by every request"""
    hasher: PasswordHasher
    otp: OTPEngine
    sessions: SessionIssuer
    google: GoogleIdentityVerifier
    mailer: Mailer
    clock: Clock = utcnow
    otp_locks: KeyedLock = field(default_factory=KeyedLock)
    _dummy_hash: Optional[str] = field(default=None, repr=False)

    @property
    def dummy_hash(self) -> str:
        """Hash compared against when the email is unknown, so timing matches"""
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_hash


def build_auth_components(settings, clock: Optional[Clock] = None) -> AuthComponents:
    clock = clock or utcnow
    return AuthComponents(
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        otp=OTPEngine(
            expire_minutes=settings.OTP_EXPIRE_MINUTES,
            length=settings.OTP_LENGTH,
            clock=clock,
        ),
        sessions=SessionIssuer(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            ttl=timedelta(days=settings.SESSION_TOKEN_EXPIRE_DAYS),
            clock=clock,
        ),
        google=GoogleIdentityVerifier(client_id=settings.GOOGLE_CLIENT_ID),
        mailer=build_mailer(settings),
        clock=clock,
    )


@dataclass
class AuthOutcome:
    """A successful authentication: the user, a fresh token, and whether the account is new"""
    user: User
    token: str
    created: bool = False


def _display_name(identity: GoogleIdentity) -> str:
    name = (identity.display_name or "").strip()
    if len(name) < 2:
        name = identity.email.split("@")[0]
    if len(name) < 2:
        name = "Google User"
    return name[:50].strip()


class AuthService:
    """
    Ties the credential store, OTP engine, Google verifier and session issuer
    together per flow. One instance per request.
    """

    def __init__(self, users: UserRepository, components: AuthComponents):
        self.users = users
        self.c = components

    # ── helpers ──────────────────────────────────────────────────────────────

    def _start_session(self, user: User, created: bool = False) -> AuthOutcome:
        user.last_login = self.c.clock()
        user = self.users.save(user)
        return AuthOutcome(user=user, token=self.c.sessions.issue(user.id), created=created)

    def _require_active(self, user: User) -> None:
        if not user.is_active:
            log_auth_event("REJECTED inactive account", user.id, user.email)
            raise UnauthorizedException(detail=ACCOUNT_DEACTIVATED)

    # ── email flow ───────────────────────────────────────────────────────────

    def signup(self, data: SignupRequest) -> User:
        """
        Create an unverified email account and send its first OTP.

        Mail delivery is best-effort here: a failed send is logged and the
        account stays created, since the user can ask for a new code.
        """
        if self.users.find_by_email(data.email):
            raise DuplicateAccountException()

        user = User(
            name=data.name,
            email=data.email,
            date_of_birth=data.date_of_birth,
            auth_method=AuthMethod.EMAIL.value,
            hashed_password=self.c.hasher.hash(data.password),
            is_email_verified=False,
            is_active=True,
        )
        code = self.c.otp.issue(user)

        try:
            user = self.users.insert(user)
        except DuplicateKeyError:
            raise DuplicateAccountException()

        log_auth_event("SIGNUP", user.id, user.email, method=AuthMethod.EMAIL.value)

        if not self.c.mailer.send_otp_email(to=user.email, otp=code, name=user.name):
            logger.warning(f"[Signup] OTP email delivery failed for {user.email}")

        return user

    def request_otp(self, email: str) -> None:
        """Issue a fresh code (invalidating any previous one) and email it."""
        with self.c.otp_locks.hold(email):
            user = self.users.find_by_email(email)
            if user is None:
                raise NotFoundException(detail="User not found")
            code = self.c.otp.issue(user)
            user = self.users.save(user)

        log_auth_event("OTP ISSUED", user.id, user.email, level=logging.INFO)

        if not self.c.mailer.send_otp_email(to=user.email, otp=code, name=user.name):
            raise EmailDeliveryException()

    def verify_otp(self, email: str, otp: str) -> AuthOutcome:
        with self.c.otp_locks.hold(email):
            user = self.users.find_by_email(email)
            if user is None:
                raise NotFoundException(detail="User not found")
            self._require_active(user)

            if not self.c.otp.verify(user, otp):
                # An expired code was cleared by verify(); keep that
                self.users.save(user)
                log_auth_event("OTP REJECTED", user.id, user.email)
                raise InvalidOrExpiredCodeException()

            outcome = self._start_session(user)

        log_auth_event("OTP VERIFIED", user.id, user.email, level=logging.INFO)
        return outcome

    def signin(self, email: str, password: str) -> AuthOutcome:
        """
        Password sign-in. Unknown email, Google-only account and wrong
        password all produce the same 401.
        """
        user = self.users.find_by_email(email)
        if user is None or user.auth_method != AuthMethod.EMAIL.value:
            self.c.hasher.verify(password, self.c.dummy_hash)
            log_auth_event("SIGNIN FAILED", user_email=email)
            raise UnauthorizedException(detail=INVALID_CREDENTIALS)

        if not self.c.hasher.verify(password, user.hashed_password):
            log_auth_event("SIGNIN FAILED", user.id, user.email)
            raise UnauthorizedException(detail=INVALID_CREDENTIALS)

        self._require_active(user)
        return self._start_session(user)

    # ── Google flow ──────────────────────────────────────────────────────────

    def _find_google_user(self, identity: GoogleIdentity) -> Optional[User]:
        user = self.users.find_by_google_id(identity.subject_id)
        if user is not None:
            return user
        return self.users.find_by_email(identity.email)

    @staticmethod
    def _owned_by(user: User, identity: GoogleIdentity) -> bool:
        """
        A Google account belongs to the subject it was bound to. An unbound
        one can only be claimed by a subject whose email Google has verified.
        """
        if user.google_id is not None:
            return user.google_id == identity.subject_id
        return identity.email_verified

    def google_signin(self, google_token: str) -> AuthOutcome:
        """Sign in an existing Google-mode account. Never creates one."""
        identity = self.c.google.verify(google_token)
        user = self._find_google_user(identity)

        if user is None or not user.is_google_account:
            log_auth_event("GOOGLE SIGNIN no account", user_email=identity.email)
            raise NoSuchAccountException()
        if not self._owned_by(user, identity):
            log_auth_event("GOOGLE SIGNIN subject mismatch", user.id, user.email)
            raise NoSuchAccountException()

        self._require_active(user)
        if user.google_id is None:
            user.google_id = identity.subject_id
        log_auth_event("GOOGLE SIGNIN", user.id, user.email, level=logging.INFO)
        return self._start_session(user)

    def google_signup(self, google_token: str, date_of_birth: str) -> AuthOutcome:
        """
        Create a Google-mode account, or sign in when one already exists.

        The provider's email_verified claim is taken as-is; no OTP step runs.
        An email-mode account with the same address is never converted.
        """
        identity = self.c.google.verify(google_token)
        existing = self._find_google_user(identity)

        if existing is not None:
            if not existing.is_google_account:
                raise DuplicateAccountException(
                    detail="An account with this email already exists. Please sign in with your email and password."
                )
            if not self._owned_by(existing, identity):
                log_auth_event("GOOGLE SIGNUP subject mismatch", existing.id, existing.email)
                raise DuplicateAccountException()
            self._require_active(existing)
            if existing.google_id is None:
                existing.google_id = identity.subject_id
            return self._start_session(existing)

        user = User(
            name=_display_name(identity),
            email=identity.email,
            date_of_birth=date_of_birth,
            auth_method=AuthMethod.GOOGLE.value,
            hashed_password=None,
            google_id=identity.subject_id,
            google_email=identity.email,
            is_email_verified=identity.email_verified,
            is_active=True,
            last_login=self.c.clock(),
        )
        try:
            user = self.users.insert(user)
        except DuplicateKeyError:
            raise DuplicateAccountException()

        log_auth_event(
            "SIGNUP", user.id, user.email,
            method=AuthMethod.GOOGLE.value, email_verified=identity.email_verified,
        )
        return AuthOutcome(user=user, token=self.c.sessions.issue(user.id), created=True)

    # ── sessions ─────────────────────────────────────────────────────────────

    def current_user(self, token: str) -> User:
        """Resolve a bearer token to an active user"""
        user_id = self.c.sessions.authenticate(token)
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundException(detail="User not found")
        self._require_active(user)
        return user

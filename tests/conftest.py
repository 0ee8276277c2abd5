import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Predictable environment before anything under app/ is imported.
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

_TEST_DB = tempfile.NamedTemporaryFile(prefix="notes_api_", suffix=".sqlite", delete=False)
_TEST_DB.close()

os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB.name}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-google-client-id")

from app.main import app  # noqa: E402  (import after env vars are set)
from app.core.dependencies import get_auth_components  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.errors.exceptions import InvalidGoogleTokenException  # noqa: E402
from app.services.auth_service import AuthComponents  # noqa: E402
from app.services.google_identity_service import GoogleIdentity  # noqa: E402
from app.services.otp_service import OTPEngine  # noqa: E402
from app.services.password_service import PasswordHasher  # noqa: E402
from app.services.session_service import SessionIssuer  # noqa: E402
from app.utils.email import Mailer  # noqa: E402

STRONG_PASSWORD = "Passw0rdOK"


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class SequenceOTPEngine(OTPEngine):
    """Hands out 111111, 222222, ... so tests know every code in advance"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.counter = 0

    def generate(self) -> str:
        self.counter += 1
        digit = str((self.counter - 1) % 9 + 1)
        return digit * self.length


class RecordingMailer(Mailer):
    def __init__(self):
        super().__init__(app_name="HD Notes Test")
        self.sent = []
        self.fail = False

    def send(self, to, subject, html_body, plain_body=""):
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "body": plain_body})
        return True

    def send_otp_email(self, to, otp, name=""):
        delivered = super().send_otp_email(to, otp, name)
        if delivered:
            self.sent[-1]["otp"] = otp
        return delivered

    @property
    def last_otp(self):
        return self.sent[-1]["otp"] if self.sent else None


class FakeGoogleVerifier:
    """Maps opaque test tokens to identities; anything else is rejected"""

    def __init__(self):
        self.identities = {}

    def register(self, token, subject_id, email, name="Google Person", email_verified=True):
        self.identities[token] = GoogleIdentity(
            subject_id=subject_id,
            email=email,
            display_name=name,
            email_verified=email_verified,
        )

    def verify(self, token):
        if token not in self.identities:
            raise InvalidGoogleTokenException()
        return self.identities[token]


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def google():
    return FakeGoogleVerifier()


@pytest.fixture()
def components(clock, mailer, google):
    return AuthComponents(
        hasher=PasswordHasher(rounds=4),
        otp=SequenceOTPEngine(expire_minutes=10, length=6, clock=clock),
        sessions=SessionIssuer("test-secret-key", clock=clock),
        google=google,
        mailer=mailer,
        clock=clock,
    )


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(components):
    app.dependency_overrides[get_auth_components] = lambda: components
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_auth_components, None)


@pytest.fixture()
def register(client):
    """Sign up through the API and return the response"""

    def _register(name="Ann Smith", email="ann@mail.com", date_of_birth="2000-01-01", password=STRONG_PASSWORD):
        return client.post(
            "/api/auth/signup",
            json={"name": name, "email": email, "dateOfBirth": date_of_birth, "password": password},
        )

    return _register


@pytest.fixture()
def signed_in(client, register, mailer):
    """Sign up + verify OTP; returns (token, user payload)"""

    def _signed_in(email="ann@mail.com", name="Ann Smith"):
        assert register(name=name, email=email).status_code == 201
        response = client.post("/api/auth/verify-otp", json={"email": email, "otp": mailer.last_otp})
        assert response.status_code == 200
        data = response.json()["data"]
        return data["token"], data["user"]

    return _signed_in


def bearer(token):
    return {"Authorization": f"Bearer {token}"}

import pytest
from google.auth import exceptions as google_exceptions

from app.errors.exceptions import (
    BadRequestException,
    ExternalServiceException,
    InvalidGoogleTokenException,
)
from app.models.user import User
from app.services import google_identity_service
from app.services.google_identity_service import GoogleIdentityVerifier
from conftest import STRONG_PASSWORD, bearer


def _google_signup(client, token="tok-ann", date_of_birth="1999-05-05"):
    return client.post("/api/auth/google/signup", json={"googleToken": token, "dateOfBirth": date_of_birth})


def _google_signin(client, token="tok-ann"):
    return client.post("/api/auth/google/signin", json={"googleToken": token})


def test_google_signup_creates_verified_account(client, google, db):
    google.register("tok-ann", "g-123", "Ann@Gmail.com", name="Ann Smith")

    response = _google_signup(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "ann@gmail.com"
    assert data["user"]["isEmailVerified"] is True

    user = db.query(User).one()
    assert user.auth_method == "google"
    assert user.google_id == "g-123"
    assert user.hashed_password is None
    assert user.otp is None
    assert user.date_of_birth == "1999-05-05"


def test_google_signup_again_signs_in(client, google, db):
    google.register("tok-ann", "g-123", "ann@gmail.com")
    assert _google_signup(client).status_code == 201

    again = _google_signup(client)

    assert again.status_code == 200
    assert again.json()["data"]["token"]
    assert db.query(User).count() == 1


def test_google_signup_respects_unverified_claim(client, google):
    google.register("tok-ann", "g-123", "ann@gmail.com", email_verified=False)

    response = _google_signup(client)

    assert response.status_code == 201
    assert response.json()["data"]["user"]["isEmailVerified"] is False


def test_google_signup_requires_date_of_birth(client, google):
    google.register("tok-ann", "g-123", "ann@gmail.com")

    response = client.post("/api/auth/google/signup", json={"googleToken": "tok-ann"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "dateOfBirth"


def test_google_signin_for_existing_account(client, google, db):
    google.register("tok-ann", "g-123", "ann@gmail.com")
    _google_signup(client)

    response = _google_signin(client)

    assert response.status_code == 200
    token = response.json()["data"]["token"]
    me = client.get("/api/auth/me", headers=bearer(token))
    assert me.json()["data"]["user"]["authMethod"] == "google"


def test_google_signin_without_account_creates_nothing(client, google, db):
    google.register("tok-ann", "g-123", "ann@gmail.com")

    response = _google_signin(client)

    assert response.status_code == 400
    assert response.json()["message"] == "No account found for this Google identity. Please sign up first."
    assert db.query(User).count() == 0


def test_email_account_is_never_converted_to_google(client, google, register, db):
    register(email="ann@gmail.com")
    google.register("tok-ann", "g-123", "ann@gmail.com")

    signin = _google_signin(client)
    signup = _google_signup(client)

    assert signin.status_code == 400
    assert signup.status_code == 400
    user = db.query(User).one()
    assert user.auth_method == "email"
    assert user.google_id is None


def test_google_account_cannot_use_password_signin(client, google):
    google.register("tok-ann", "g-123", "ann@gmail.com")
    _google_signup(client)

    response = client.post("/api/auth/signin", json={"email": "ann@gmail.com", "password": STRONG_PASSWORD})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_rejected_google_token_is_401(client):
    response = _google_signin(client, token="forged")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_google_token_is_required(client):
    assert client.post("/api/auth/google/signin", json={}).status_code == 400
    assert client.post("/api/auth/google/signin", json={"googleToken": ""}).status_code == 400


class TestGoogleIdentityVerifier:
    def test_verified_claims_become_identity(self, monkeypatch):
        def fake_verify(token, request, audience):
            assert token == "id-token"
            assert audience == "client-id"
            return {"sub": "g-1", "email": " Ann@Gmail.COM ", "name": "Ann", "email_verified": True}

        monkeypatch.setattr(google_identity_service.google_id_token, "verify_oauth2_token", fake_verify)

        identity = GoogleIdentityVerifier("client-id", request=object()).verify("id-token")

        assert identity.subject_id == "g-1"
        assert identity.email == "ann@gmail.com"
        assert identity.display_name == "Ann"
        assert identity.email_verified is True

    def test_invalid_token_is_unauthorized(self, monkeypatch):
        def fake_verify(token, request, audience):
            raise ValueError("Token expired")

        monkeypatch.setattr(google_identity_service.google_id_token, "verify_oauth2_token", fake_verify)

        with pytest.raises(InvalidGoogleTokenException) as exc_info:
            GoogleIdentityVerifier("client-id", request=object()).verify("id-token")
        assert exc_info.value.status_code == 401

    def test_transport_failure_is_external_error(self, monkeypatch):
        def fake_verify(token, request, audience):
            raise google_exceptions.TransportError("certs unreachable")

        monkeypatch.setattr(google_identity_service.google_id_token, "verify_oauth2_token", fake_verify)

        with pytest.raises(ExternalServiceException) as exc_info:
            GoogleIdentityVerifier("client-id", request=object()).verify("id-token")
        assert exc_info.value.status_code == 500

    def test_missing_email_claim_is_rejected(self, monkeypatch):
        monkeypatch.setattr(
            google_identity_service.google_id_token,
            "verify_oauth2_token",
            lambda token, request, audience: {"sub": "g-1"},
        )

        with pytest.raises(InvalidGoogleTokenException):
            GoogleIdentityVerifier("client-id", request=object()).verify("id-token")

    def test_unconfigured_verifier_refuses(self):
        verifier = GoogleIdentityVerifier("")

        assert verifier.configured is False
        with pytest.raises(BadRequestException):
            verifier.verify("id-token")


@pytest.mark.parametrize("email_verified", [False, True])
def test_other_google_subject_cannot_take_over_account(client, google, db, email_verified):
    google.register("tok-owner", "g-owner", "ann@corp.com")
    assert _google_signup(client, token="tok-owner").status_code == 201
    google.register("tok-other", "g-other", "ann@corp.com", email_verified=email_verified)

    signin = _google_signin(client, token="tok-other")
    signup = _google_signup(client, token="tok-other")

    assert signin.status_code == 400
    assert "data" not in signin.json()
    assert signup.status_code == 400
    assert "data" not in signup.json()
    user = db.query(User).one()
    assert user.google_id == "g-owner"


def _unbind_google_id(db):
    user = db.query(User).one()
    user.google_id = None
    db.commit()


def test_unbound_google_account_is_claimed_by_verified_email(client, google, db):
    google.register("tok-ann", "g-123", "ann@gmail.com")
    _google_signup(client)
    _unbind_google_id(db)
    google.register("tok-new", "g-456", "ann@gmail.com", email_verified=True)

    response = _google_signin(client, token="tok-new")

    assert response.status_code == 200
    db.expire_all()
    assert db.query(User).one().google_id == "g-456"


def test_unbound_google_account_rejects_unverified_email(client, google, db):
    google.register("tok-ann", "g-123", "ann@gmail.com")
    _google_signup(client)
    _unbind_google_id(db)
    google.register("tok-new", "g-456", "ann@gmail.com", email_verified=False)

    assert _google_signin(client, token="tok-new").status_code == 400
    assert _google_signup(client, token="tok-new").status_code == 400
    db.expire_all()
    assert db.query(User).one().google_id is None

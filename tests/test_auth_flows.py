import pytest

from app.models.user import User
from conftest import STRONG_PASSWORD, bearer


def _user(db, email="ann@mail.com"):
    db.expire_all()
    return db.query(User).filter(User.email == email).first()


def test_signup_creates_unverified_user_with_live_otp(register, mailer, db):
    response = register()

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["email"] == "ann@mail.com"
    assert payload["data"]["isEmailVerified"] is False

    user = _user(db)
    assert user.id == payload["data"]["userId"]
    assert user.is_email_verified is False
    assert user.auth_method == "email"
    assert user.otp == "111111"
    assert user.otp_expiry is not None
    assert user.hashed_password and user.hashed_password != STRONG_PASSWORD

    assert len(mailer.sent) == 1
    assert mailer.sent[0]["to"] == "ann@mail.com"
    assert mailer.last_otp == "111111"


def test_signup_normalizes_email_and_name(register, db):
    response = register(name="  Ann Smith  ", email="  Ann@Mail.COM ")

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "ann@mail.com"
    assert _user(db).name == "Ann Smith"


def test_duplicate_signup_is_rejected(register, db):
    assert register().status_code == 201

    response = register(email="ANN@mail.com")

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "User with this email already exists"
    assert db.query(User).count() == 1


def test_signup_validation_errors_are_400_with_fields(register):
    response = register(name="A")
    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["errors"][0]["field"] == "name"
    assert payload["message"] == "Name must be at least 2 characters long"

    assert register(email="not-an-email").status_code == 400
    assert register(password="short").status_code == 400
    assert register(date_of_birth="   ").status_code == 400


def test_signup_succeeds_even_when_email_fails(register, mailer, db):
    mailer.fail = True

    response = register()

    assert response.status_code == 201
    assert _user(db).otp == "111111"


def test_wrong_then_right_code_scenario(client, register):
    assert register().status_code == 201

    wrong = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "000000"})
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid or expired OTP"

    right = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "111111"})
    assert right.status_code == 200
    data = right.json()["data"]
    assert data["token"]
    assert data["user"]["isEmailVerified"] is True
    assert data["user"]["email"] == "ann@mail.com"
    assert data["user"]["lastLogin"] is not None
    assert "password" not in data["user"]
    assert "otp" not in data["user"]


def test_otp_is_single_use(client, register, db):
    register()
    body = {"email": "ann@mail.com", "otp": "111111"}

    assert client.post("/api/auth/verify-otp", json=body).status_code == 200
    assert _user(db).otp is None

    again = client.post("/api/auth/verify-otp", json=body)
    assert again.status_code == 400
    assert again.json()["message"] == "Invalid or expired OTP"


def test_get_otp_invalidates_previous_code(client, register, mailer):
    register()

    response = client.post("/api/auth/get-otp", json={"email": "ann@mail.com"})
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "data" not in response.json()
    assert mailer.last_otp == "222222"

    stale = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "111111"})
    assert stale.status_code == 400

    fresh = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "222222"})
    assert fresh.status_code == 200


def test_expired_code_is_cleared_and_late_resubmission_fails(client, register, clock, db):
    register()
    clock.advance(minutes=10)

    late = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "111111"})
    assert late.status_code == 400

    user = _user(db)
    assert user.otp is None
    assert user.otp_expiry is None
    assert user.is_email_verified is False

    again = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "111111"})
    assert again.status_code == 400


def test_get_otp_for_unknown_email_is_404(client):
    response = client.post("/api/auth/get-otp", json={"email": "nobody@mail.com"})

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_get_otp_surfaces_mail_failure(client, register, mailer):
    register()
    mailer.fail = True

    response = client.post("/api/auth/get-otp", json={"email": "ann@mail.com"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Failed to send OTP email"


def test_verify_otp_for_unknown_email_is_404(client):
    response = client.post("/api/auth/verify-otp", json={"email": "nobody@mail.com", "otp": "111111"})
    assert response.status_code == 404


def test_verify_otp_requires_both_fields(client):
    assert client.post("/api/auth/verify-otp", json={"email": "ann@mail.com"}).status_code == 400
    assert client.post("/api/auth/verify-otp", json={"otp": "111111"}).status_code == 400


def test_signin_with_password(client, register, clock, db):
    register()

    response = client.post("/api/auth/signin", json={"email": "Ann@Mail.com", "password": STRONG_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["isEmailVerified"] is False
    assert _user(db).last_login is not None


def test_signin_does_not_reveal_which_credential_was_wrong(client, register):
    register()

    bad_password = client.post("/api/auth/signin", json={"email": "ann@mail.com", "password": "Wrong1234"})
    no_user = client.post("/api/auth/signin", json={"email": "who@mail.com", "password": STRONG_PASSWORD})

    assert bad_password.status_code == 401
    assert no_user.status_code == 401
    assert bad_password.json()["message"] == no_user.json()["message"] == "Invalid credentials"


def test_inactive_account_cannot_authenticate(client, register, db):
    register()
    user = _user(db)
    user.is_active = False
    db.commit()

    signin = client.post("/api/auth/signin", json={"email": "ann@mail.com", "password": STRONG_PASSWORD})
    assert signin.status_code == 401
    assert signin.json()["message"] == "Account is deactivated"

    verify = client.post("/api/auth/verify-otp", json={"email": "ann@mail.com", "otp": "111111"})
    assert verify.status_code == 401


def test_me_returns_sanitized_profile(client, signed_in):
    token, _ = signed_in()

    response = client.get("/api/auth/me", headers=bearer(token))

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["email"] == "ann@mail.com"
    assert user["dateOfBirth"] == "2000-01-01"
    assert user["authMethod"] == "email"
    for hidden in ("password", "hashedPassword", "otp", "otpExpiry"):
        assert hidden not in user


def test_me_requires_valid_token(client, signed_in, clock):
    token, _ = signed_in()

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=bearer("garbage")).status_code == 401

    clock.advance(days=7, seconds=1)
    expired = client.get("/api/auth/me", headers=bearer(token))
    assert expired.status_code == 401
    assert expired.json()["success"] is False


def test_logout_is_client_side_only(client, signed_in):
    token, _ = signed_in()

    response = client.post("/api/auth/logout", headers=bearer(token))
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"

    # Stateless tokens stay valid until they expire
    assert client.get("/api/auth/me", headers=bearer(token)).status_code == 200


def test_logout_requires_token(client):
    assert client.post("/api/auth/logout").status_code == 401


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


@pytest.mark.parametrize(
    "password, message",
    [
        ("Passw0r", "Password must be at least 8 characters long"),
        ("abcdefgh", "Password must contain at least one digit"),
        ("abcdefg1", "Password must contain at least one uppercase letter"),
        ("ABCDEFG1", "Password must contain at least one lowercase letter"),
        ("Abcdefg1" + "x" * 93, "String should have at most 100 characters"),
    ],
)
def test_signup_password_policy_rejections(register, password, message):
    response = register(password=password)

    assert response.status_code == 400
    payload = response.json()
    assert payload["errors"][0]["field"] == "password"
    assert payload["message"] == message


@pytest.mark.parametrize("password", ["Abcdefg1", "Abcdefg1" + "x" * 92])
def test_signup_password_policy_boundaries_accepted(register, password):
    assert register(password=password).status_code == 201


def test_signin_applies_no_strength_rule(client, register):
    register()

    response = client.post("/api/auth/signin", json={"email": "ann@mail.com", "password": "x"})

    assert response.status_code == 401


def test_timestamps_carry_utc_offset(client, signed_in):
    token, user = signed_in()
    assert user["lastLogin"].endswith(("Z", "+00:00"))

    profile = client.get("/api/auth/me", headers=bearer(token)).json()["data"]["user"]
    for key in ("lastLogin", "createdAt"):
        assert profile[key].endswith(("Z", "+00:00"))

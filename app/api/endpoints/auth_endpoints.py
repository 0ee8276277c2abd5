"""Authentication endpoints"""
from fastapi import APIRouter, Depends, Response, status
import logging

from app.core.dependencies import get_auth_service
from app.errors.response_codes import SuccessCode, success_response
from app.middleware.auth import get_current_user, get_current_user_id
from app.models.user import User
from app.schemas.auth_schemas import (
    AuthResult,
    GoogleSigninRequest,
    GoogleSignupRequest,
    OTPRequest,
    OTPVerifyRequest,
    SigninRequest,
    SignupRequest,
    SignupResult,
    UserProfile,
    UserSummary,
)
from app.services.auth_service import AuthOutcome, AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


def _auth_payload(outcome: AuthOutcome) -> dict:
    result = AuthResult(token=outcome.token, user=UserSummary.model_validate(outcome.user))
    return result.model_dump(by_alias=True, mode="json")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    """
    ## Register a new email account

    **Role:** Public.

    Creates an unverified account and emails a 6-digit OTP. A failed email
    send does not undo the signup; the client can call `/get-otp` again.

    ### Required fields (JSON body)
    | Field       | Type   | Description                      |
    |-------------|--------|----------------------------------|
    | name        | string | 2-50 characters                  |
    | email       | string | Valid email, OTP is sent here    |
    | dateOfBirth | string | Required                         |
    | password    | string | 8+ chars, upper, lower and digit |

    ### Responses
    - 201 → `data: { userId, email, isEmailVerified }`
    - 400 → validation error, or "User with this email already exists"
    """
    user = auth.signup(body)
    result = SignupResult(user_id=user.id, email=user.email, is_email_verified=user.is_email_verified)
    return success_response(SuccessCode.USER_REGISTERED, data=result.model_dump(by_alias=True))


@router.post("/get-otp")
def get_otp(body: OTPRequest, auth: AuthService = Depends(get_auth_service)):
    """
    ## Send a fresh OTP to an existing account

    Any earlier unused code stops working. Unlike signup, a failed email
    send is reported (500 "Failed to send OTP email").

    - 404 → no account for this email
    """
    auth.request_otp(body.email)
    return success_response(SuccessCode.OTP_SENT)


@router.post("/verify-otp")
def verify_otp(body: OTPVerifyRequest, auth: AuthService = Depends(get_auth_service)):
    """
    ## Verify an OTP and start a session

    A correct, unexpired code works exactly once: it marks the email as
    verified and returns a session token.

    - 200 → `data: { token, user }`
    - 400 → "Invalid or expired OTP"
    - 404 → no account for this email
    """
    outcome = auth.verify_otp(body.email, body.otp)
    return success_response(SuccessCode.OTP_VERIFIED, data=_auth_payload(outcome))


@router.post("/signin")
def signin(body: SigninRequest, auth: AuthService = Depends(get_auth_service)):
    """
    ## Sign in with email and password

    - 200 → `data: { token, user }`
    - 401 → "Invalid credentials" (unknown email and wrong password look the same)
    """
    outcome = auth.signin(body.email, body.password)
    return success_response(SuccessCode.SIGNED_IN, data=_auth_payload(outcome))


@router.post("/google/signup", status_code=status.HTTP_201_CREATED)
def google_signup(
    body: GoogleSignupRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """
    ## Sign up with a Google ID token

    - 201 → new Google account created, `data: { token, user }`
    - 200 → the Google account already existed and is signed in
    - 400 → the email belongs to an email/password account
    - 401 → Google rejected the token
    """
    outcome = auth.google_signup(body.google_token, body.date_of_birth)
    if not outcome.created:
        response.status_code = status.HTTP_200_OK
        return success_response(SuccessCode.SIGNED_IN, data=_auth_payload(outcome))
    return success_response(SuccessCode.USER_REGISTERED, message="Google signup successful", data=_auth_payload(outcome))


@router.post("/google/signin")
def google_signin(body: GoogleSigninRequest, auth: AuthService = Depends(get_auth_service)):
    """
    ## Sign in with a Google ID token

    Only existing Google accounts can sign in here; nothing is created.

    - 400 → no Google account for this identity
    """
    outcome = auth.google_signin(body.google_token)
    return success_response(SuccessCode.SIGNED_IN, message="Google signin successful", data=_auth_payload(outcome))


@router.post("/logout")
def logout(user_id: str = Depends(get_current_user_id)):
    """
    ## Log out

    Tokens are stateless, so this only confirms the token is valid; the
    client discards it. The token itself stays valid until it expires.
    """
    logger.info(f"Logout for user {user_id}")
    return success_response(SuccessCode.LOGGED_OUT)


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    """
    ## Current user's profile

    Password and OTP fields are never included.
    """
    profile = UserProfile.model_validate(current_user).model_dump(by_alias=True, mode="json")
    return success_response(SuccessCode.RETRIEVED, data={"user": profile})

"""Identity helpers: ID token verification, password sign-in and the auth cookie."""

from __future__ import annotations

from typing import Any, Optional

import requests
from firebase_admin import auth
from firebase_admin.auth import (
    CertificateFetchError,
    InvalidIdTokenError,
    UserDisabledError,
)
from flask import current_app, request

from viralviews.core.types import AuthContext
from viralviews.errors import (
    AuthenticationError,
    ExternalServiceError,
    TooManyAttemptsError,
)

IDENTITY_TOOLKIT_SIGN_IN_URL = (
    "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
)
IDENTITY_TIMEOUT_SECONDS = 10

# Identity Toolkit error codes that mean "wrong email or password".
INVALID_CREDENTIAL_CODES = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
}


def get_request_token() -> Optional[str]:
    """Return the ID token from the Authorization header or the auth cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def authenticate_request() -> Optional[AuthContext]:
    """Verify the request's ID token. Returns None for anonymous callers."""
    token = get_request_token()
    if not token:
        return None

    try:
        decoded = auth.verify_id_token(token)
    except (InvalidIdTokenError, UserDisabledError, ValueError) as e:
        current_app.logger.info(f"Rejected ID token: {e}")
        return None
    except CertificateFetchError as e:
        current_app.logger.error(f"Could not fetch token certificates: {e}")
        return None

    return AuthContext(
        uid=decoded["uid"],
        email=decoded.get("email"),
        admin=bool(decoded.get("admin", False)),
        displayName=decoded.get("name"),
        photoURL=decoded.get("picture"),
    )


def sign_in_with_password(email: str, password: str) -> dict[str, Any]:
    """Exchange an email and password for an ID token.

    The Admin SDK cannot check passwords, so this goes through the Identity
    Toolkit REST endpoint the client SDKs use.

    Raises:
        AuthenticationError: for unknown users or wrong passwords.
        TooManyAttemptsError: when the account is temporarily locked.
        ExternalServiceError: for anything else.
    """
    api_key = current_app.config.get("FIREBASE_API_KEY")
    if not api_key:
        current_app.logger.error("FIREBASE_API_KEY is not set. Sign-in is unavailable.")
        raise ExternalServiceError("Authentication failed")

    try:
        response = requests.post(
            IDENTITY_TOOLKIT_SIGN_IN_URL,
            params={"key": api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=IDENTITY_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        current_app.logger.error(f"Identity service request failed: {e}")
        raise ExternalServiceError("Authentication failed") from e

    if response.ok:
        return response.json()

    try:
        message = response.json().get("error", {}).get("message", "")
    except ValueError:
        message = ""
    # Messages look like "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account..."
    code = message.split(" ")[0]

    if code in INVALID_CREDENTIAL_CODES:
        raise AuthenticationError("Invalid email or password")
    if code.startswith("TOO_MANY_ATTEMPTS"):
        raise TooManyAttemptsError()

    current_app.logger.error(f"Unexpected identity service error: {message}")
    raise ExternalServiceError("Authentication failed")


def set_auth_cookie(response: Any, id_token: str) -> Any:
    """Attach the ID token as an http-only, same-site-strict cookie."""
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        id_token,
        max_age=current_app.config["AUTH_COOKIE_MAX_AGE"],
        httponly=True,
        secure=current_app.config["APP_ENV"] == "production",
        samesite="Strict",
        path="/",
    )
    return response


def clear_auth_cookie(response: Any) -> Any:
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"], path="/")
    return response

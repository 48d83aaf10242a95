"""Client for the managed identity provider (identity-toolkit REST API)."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# Provider error code -> (user-facing message, HTTP status for our API)
ERROR_MESSAGES = {
    "EMAIL_EXISTS": ("This email is already registered", 409),
    "WEAK_PASSWORD": ("Password is too weak. Use at least 6 characters", 400),
    "INVALID_EMAIL": ("Invalid email address", 400),
    "EMAIL_NOT_FOUND": ("No account found with this email", 401),
    "INVALID_PASSWORD": ("Incorrect password", 401),
    "INVALID_LOGIN_CREDENTIALS": ("Incorrect email or password", 401),
    "USER_DISABLED": ("This account has been disabled", 401),
    "TOO_MANY_ATTEMPTS_TRY_LATER": ("Too many failed attempts. Please try again later", 429),
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": ("Please logout and login again to change your password", 401),
    "TOKEN_EXPIRED": ("Please logout and login again to change your password", 401),
    "INVALID_ID_TOKEN": ("Please logout and login again to change your password", 401),
    "NETWORK_ERROR": ("Could not reach the sign-in service. Please try again", 502),
}

STALE_SESSION_CODES = {"CREDENTIAL_TOO_OLD_LOGIN_AGAIN", "TOKEN_EXPIRED", "INVALID_ID_TOKEN"}


class IdentityError(Exception):
    """An identity-provider failure, carrying the provider's error code."""

    def __init__(self, code: str, detail: Optional[str] = None):
        self.code = code
        self.detail = detail
        message, self.status_code = ERROR_MESSAGES.get(
            code, ("Authentication failed. Please try again", 400)
        )
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)

    @property
    def stale_session(self) -> bool:
        return self.code in STALE_SESSION_CODES


@dataclass
class IdentityAccount:
    uid: str
    email: str
    id_token: str


def _endpoint(method: str) -> str:
    base = (os.getenv("IDENTITY_URL") or "https://identitytoolkit.googleapis.com").rstrip("/")
    key = os.getenv("IDENTITY_API_KEY", "")
    return f"{base}/v1/accounts:{method}?key={key}"


def _error_code(response: httpx.Response) -> str:
    """Extract the leading code from ``{"error": {"message": "CODE : detail"}}``."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP_{response.status_code}"
    return message.split(":")[0].strip()


def _call(method: str, payload: dict) -> dict:
    try:
        response = httpx.post(_endpoint(method), json=payload, timeout=30)
    except httpx.RequestError as e:
        logger.error("Identity provider unreachable (%s): %s", method, e)
        raise IdentityError("NETWORK_ERROR", str(e)) from e

    if response.status_code >= 400:
        code = _error_code(response)
        logger.warning("Identity provider refused %s: %s", method, code)
        raise IdentityError(code)
    return response.json()


def _to_account(body: dict, email: str) -> IdentityAccount:
    return IdentityAccount(
        uid=body["localId"],
        email=body.get("email", email),
        id_token=body.get("idToken", ""),
    )


def create_account(email: str, password: str) -> IdentityAccount:
    """Create an email/password account and return the new user id."""
    body = _call("signUp", {"email": email, "password": password, "returnSecureToken": True})
    return _to_account(body, email)


def sign_in(email: str, password: str) -> IdentityAccount:
    body = _call(
        "signInWithPassword",
        {"email": email, "password": password, "returnSecureToken": True},
    )
    return _to_account(body, email)


def change_password(id_token: str, new_password: str) -> str:
    """Change the signed-in user's password and return the refreshed id token.

    Raises IdentityError with ``stale_session`` set when the provider wants
    the user to sign in again first.
    """
    body = _call(
        "update",
        {"idToken": id_token, "password": new_password, "returnSecureToken": True},
    )
    return body.get("idToken", id_token)

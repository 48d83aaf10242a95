"""Registration, sign-in, sign-out and password routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from app.auth import provider
from app.auth.session import UserContext, create_session, delete_session, get_session, update_session_token
from app.models.volunteer import get_volunteer
from app.routes.deps import get_current_user, get_store
from app.rules.validator import validate_login, validate_new_password
from app.rules.workflow import ValidationFailed, register_volunteer
from app.store import DocumentStore

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    chapter: str = ""
    confirm_password: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class PasswordRequest(BaseModel):
    new_password: str = ""
    confirm_password: Optional[str] = None


@router.post("/register", status_code=201)
def register(body: RegisterRequest, store: DocumentStore = Depends(get_store)):
    """Create the account and a pending volunteer profile, then sign in."""
    volunteer, account = register_volunteer(
        store,
        name=body.name,
        email=body.email.strip(),
        password=body.password,
        chapter=body.chapter,
        confirm_password=body.confirm_password,
    )
    token = create_session(store, account.uid, account.id_token)
    return {
        "message": "Registration successful! Welcome to YSP!",
        "token": token,
        "volunteer": volunteer.model_dump(),
    }


@router.post("/login")
def login(body: LoginRequest, store: DocumentStore = Depends(get_store)):
    errors = validate_login(body.email.strip(), body.password)
    if errors:
        raise ValidationFailed(errors)

    account = provider.sign_in(body.email.strip(), body.password)
    volunteer = get_volunteer(store, account.uid)
    if volunteer is None:
        raise HTTPException(status_code=404, detail="No volunteer profile found for this account")

    token = create_session(store, account.uid, account.id_token)
    return {
        "message": "Login successful!",
        "token": token,
        "volunteer": volunteer.model_dump(),
    }


@router.post("/logout", status_code=204)
def logout(
    user: UserContext = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    delete_session(store, user.token)
    return Response(status_code=204)


@router.post("/password")
def change_password(
    body: PasswordRequest,
    user: UserContext = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """Change the password; a stale session gets 401 and must sign in again."""
    errors = validate_new_password(body.new_password, body.confirm_password)
    if errors:
        raise ValidationFailed(errors)

    session = get_session(store, user.token)
    new_id_token = provider.change_password(session["id_token"] or "", body.new_password)
    update_session_token(store, user.token, new_id_token)
    return {"message": "Password updated successfully!"}

"""Form validation run before any identity, store or media call.

Each ``validate_*`` function returns a dict of field name -> message.
An empty dict means the form is valid.
"""

from __future__ import annotations

import re
from typing import Optional

from app.models.project import PROJECT_STATUSES
from app.models.volunteer import CHAPTERS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= MIN_PASSWORD_LENGTH


def is_valid_name(name: str) -> bool:
    return len((name or "").strip()) >= MIN_NAME_LENGTH


def validate_login(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_registration(
    name: str,
    email: str,
    password: str,
    chapter: str,
    confirm_password: Optional[str] = None,
) -> dict[str, str]:
    """Check a registration form.

    ``confirm_password`` is only checked when the caller sends it.
    """
    errors: dict[str, str] = {}

    if not name:
        errors["name"] = "Name is required"
    elif not is_valid_name(name):
        errors["name"] = "Name must be at least 2 characters"

    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"

    if not password:
        errors["password"] = "Password is required"
    elif not is_valid_password(password):
        errors["password"] = "Password must be at least 6 characters"

    if confirm_password is not None and confirm_password != password:
        errors["confirm_password"] = "Passwords do not match"

    if not chapter:
        errors["chapter"] = "Please select a chapter"
    elif chapter not in CHAPTERS:
        errors["chapter"] = f"Unknown chapter: {chapter}"

    return errors


def validate_new_password(password: str, confirm_password: Optional[str] = None) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not is_valid_password(password):
        errors["new_password"] = "Password must be at least 6 characters"
    elif confirm_password is not None and confirm_password != password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


def validate_project(name: str, description: str, chapter: str, status: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (name or "").strip():
        errors["name"] = "Name is required"
    if not (description or "").strip():
        errors["description"] = "Description is required"
    if not chapter:
        errors["chapter"] = "Please select a chapter"
    elif chapter not in CHAPTERS:
        errors["chapter"] = f"Unknown chapter: {chapter}"
    if status not in PROJECT_STATUSES:
        errors["status"] = f"Status must be one of: {', '.join(PROJECT_STATUSES)}"
    return errors

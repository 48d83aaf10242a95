from __future__ import annotations

import secrets
import sqlite3
from dataclasses import dataclass
from typing import Optional

from app.models.volunteer import get_volunteer
from app.store import DocumentStore


@dataclass
class UserContext:
    volunteer_id: str
    name: str
    role: str
    status: str
    chapter: str
    token: str


def create_session(store: DocumentStore, uid: str, id_token: str) -> str:
    """Store a new session for ``uid`` and return its bearer token."""
    token = secrets.token_urlsafe(32)
    with store.transaction():
        store.conn.execute(
            "INSERT INTO sessions (token, uid, id_token) VALUES (?, ?, ?)",
            (token, uid, id_token),
        )
    return token


def get_session(store: DocumentStore, token: str) -> Optional[sqlite3.Row]:
    with store.transaction():
        return store.conn.execute(
            "SELECT * FROM sessions WHERE token = ?", (token,)
        ).fetchone()


def update_session_token(store: DocumentStore, token: str, id_token: str) -> None:
    with store.transaction():
        store.conn.execute(
            "UPDATE sessions SET id_token = ? WHERE token = ?", (id_token, token)
        )


def delete_session(store: DocumentStore, token: str) -> bool:
    """Sign out. Returns False if the token was unknown."""
    with store.transaction():
        cursor = store.conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
    return cursor.rowcount > 0


def get_user_context(store: DocumentStore, token: str) -> UserContext | None:
    """Resolve a bearer token to the signed-in volunteer.

    Returns None if the token is unknown or the profile document is missing.
    """
    session = get_session(store, token)
    if session is None:
        return None
    volunteer = get_volunteer(store, session["uid"])
    if volunteer is None:
        return None
    return UserContext(
        volunteer_id=volunteer.id,
        name=volunteer.name,
        role=volunteer.role,
        status=volunteer.status,
        chapter=volunteer.chapter,
        token=token,
    )

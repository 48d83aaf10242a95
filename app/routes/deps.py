"""Shared route dependencies: store access, signed-in user, permission guard."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from app.auth.session import UserContext, get_user_context
from app.rules import pure
from app.rules.permissions import Action, can
from app.rules.workflow import WorkflowOutcome
from app.store import DocumentStore

# Refusal code -> HTTP status
OUTCOME_STATUS = {
    pure.NOT_FOUND: 404,
    pure.NO_APPLICATION: 404,
    pure.PENDING_APPROVAL: 403,
    pure.PROJECT_CLOSED: 409,
    pure.ALREADY_APPLIED: 409,
    pure.ALREADY_ASSIGNED: 409,
    pure.INVALID_STATUS: 422,
}


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def _bearer_token(request: Request) -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Please login to continue")
    return token.strip()


def get_current_user(
    request: Request, store: DocumentStore = Depends(get_store)
) -> UserContext:
    user = get_user_context(store, _bearer_token(request))
    if user is None:
        raise HTTPException(status_code=401, detail="Session expired. Please login again")
    return user


def require(action: Action):
    """Dependency factory: the signed-in user must be allowed ``action``."""

    def dependency(user: UserContext = Depends(get_current_user)) -> UserContext:
        if not can(user.role, action):
            raise HTTPException(status_code=403, detail="Access denied. Admin access required.")
        return user

    return dependency


def outcome_response(outcome: WorkflowOutcome) -> dict:
    """Turn a refused outcome into an HTTPException, a successful one into a body."""
    if not outcome.success:
        raise HTTPException(
            status_code=OUTCOME_STATUS.get(outcome.code, 400), detail=outcome.message
        )
    return {"message": outcome.message, "writes": outcome.writes}

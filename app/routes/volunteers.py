"""Volunteer-related API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.auth.session import UserContext
from app.models.project import list_projects
from app.models.volunteer import VOLUNTEER_STATUSES, Volunteer, get_volunteer, list_volunteers, update_volunteer_name
from app.routes.deps import get_current_user, get_store, outcome_response, require
from app.rules.permissions import Action
from app.rules.queries import assigned_projects, pending_applications
from app.rules.workflow import set_volunteer_status
from app.store import DocumentStore

router = APIRouter(prefix="/api/volunteers", tags=["volunteers"])


class ProfileUpdate(BaseModel):
    name: str = ""


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------

def _own_profile(store: DocumentStore, user: UserContext) -> Volunteer:
    volunteer = get_volunteer(store, user.volunteer_id)
    if volunteer is None:
        raise HTTPException(status_code=404, detail="Volunteer not found")
    return volunteer


@router.get("/me", response_model=Volunteer)
def get_me(
    user: UserContext = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return _own_profile(store, user)


@router.patch("/me", response_model=Volunteer)
def update_me(
    body: ProfileUpdate,
    user: UserContext = Depends(require(Action.UPDATE_OWN_PROFILE)),
    store: DocumentStore = Depends(get_store),
):
    """Rename the signed-in volunteer. Email is fixed at registration."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Name is required")
    volunteer = update_volunteer_name(store, user.volunteer_id, name)
    if volunteer is None:
        raise HTTPException(status_code=404, detail="Volunteer not found")
    return volunteer


@router.get("/me/projects")
def get_my_projects(
    user: UserContext = Depends(require(Action.VIEW_OWN_DASHBOARD)),
    store: DocumentStore = Depends(get_store),
):
    """Assigned projects and still-pending applications of the signed-in volunteer."""
    volunteer = _own_profile(store, user)
    projects = list_projects(store)
    return {
        "status": volunteer.status,
        "assigned": [p.model_dump() for p in assigned_projects(volunteer, projects)],
        "pending": [p.model_dump() for p in pending_applications(volunteer, projects)],
    }


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@router.get("", response_model=list[Volunteer])
def get_volunteers(
    status: Optional[str] = Query(None),
    user: UserContext = Depends(require(Action.REVIEW_VOLUNTEERS)),
    store: DocumentStore = Depends(get_store),
):
    """List volunteers, optionally filtered by ?status=pending|approved|rejected."""
    if status is not None and status not in VOLUNTEER_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status: {status}")
    return list_volunteers(store, status=status)


@router.post("/{volunteer_id}/approve")
def approve_volunteer(
    volunteer_id: str,
    user: UserContext = Depends(require(Action.REVIEW_VOLUNTEERS)),
    store: DocumentStore = Depends(get_store),
):
    return outcome_response(set_volunteer_status(store, volunteer_id, approve=True))


@router.post("/{volunteer_id}/reject")
def reject_volunteer(
    volunteer_id: str,
    user: UserContext = Depends(require(Action.REVIEW_VOLUNTEERS)),
    store: DocumentStore = Depends(get_store),
):
    return outcome_response(set_volunteer_status(store, volunteer_id, approve=False))

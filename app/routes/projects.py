"""Project route handlers: catalogue, creation, applications."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel

from app.auth.session import UserContext
from app.models.project import PROJECT_OPEN, PROJECT_STATUSES, Project, get_project, list_projects, set_project_status
from app.models.volunteer import Volunteer, list_volunteers
from app.routes.deps import get_store, outcome_response, require
from app.rules.permissions import Action
from app.rules.queries import project_applicants, project_assigned_volunteers
from app.rules.workflow import apply_to_project, approve_application, create_project_with_image, reject_application
from app.store import DocumentStore

router = APIRouter(prefix="/api/projects", tags=["projects"])


class StatusUpdate(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

@router.get("", response_model=list[Project])
def get_projects(
    status: Optional[str] = Query(PROJECT_OPEN),
    store: DocumentStore = Depends(get_store),
):
    """List projects. Open ones by default; ?status=all returns every project."""
    if status == "all":
        return list_projects(store)
    if status not in PROJECT_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status: {status}")
    return list_projects(store, status=status)


@router.get("/{project_id}", response_model=Project)
def get_one_project(project_id: str, store: DocumentStore = Depends(get_store)):
    project = get_project(store, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/{project_id}/volunteers")
def get_project_volunteers(
    project_id: str,
    user: UserContext = Depends(require(Action.REVIEW_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    """Applicants awaiting a decision and volunteers already assigned."""
    project = get_project(store, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    volunteers: list[Volunteer] = list_volunteers(store)
    return {
        "applicants": [v.model_dump() for v in project_applicants(project, volunteers)],
        "assigned": [v.model_dump() for v in project_assigned_volunteers(project, volunteers)],
    }


# ---------------------------------------------------------------------------
# Admin: create / open / close
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
def post_project(
    name: str = Form(""),
    description: str = Form(""),
    chapter: str = Form(""),
    status: str = Form(PROJECT_OPEN),
    image: Optional[UploadFile] = File(None),
    user: UserContext = Depends(require(Action.MANAGE_PROJECTS)),
    store: DocumentStore = Depends(get_store),
):
    upload = None
    if image is not None and image.filename:
        upload = (image.filename, image.file.read(), image.content_type or "")

    project, warnings = create_project_with_image(
        store,
        name=name,
        description=description,
        chapter=chapter,
        status=status,
        image=upload,
    )
    return {
        "message": "Project created successfully!",
        "project": project.model_dump(),
        "warnings": warnings,
    }


@router.patch("/{project_id}/status", response_model=Project)
def patch_project_status(
    project_id: str,
    body: StatusUpdate,
    user: UserContext = Depends(require(Action.MANAGE_PROJECTS)),
    store: DocumentStore = Depends(get_store),
):
    """Open or close a project. Closing blocks new applications only."""
    if body.status not in PROJECT_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status: {body.status}")
    project = set_project_status(store, project_id, body.status)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

@router.post("/{project_id}/apply")
def post_application(
    project_id: str,
    user: UserContext = Depends(require(Action.APPLY)),
    store: DocumentStore = Depends(get_store),
):
    return outcome_response(apply_to_project(store, user.volunteer_id, project_id))


@router.post("/{project_id}/applications/{volunteer_id}/approve")
def post_approve_application(
    project_id: str,
    volunteer_id: str,
    user: UserContext = Depends(require(Action.REVIEW_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    return outcome_response(approve_application(store, project_id, volunteer_id))


@router.post("/{project_id}/applications/{volunteer_id}/reject")
def post_reject_application(
    project_id: str,
    volunteer_id: str,
    user: UserContext = Depends(require(Action.REVIEW_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    return outcome_response(reject_application(store, project_id, volunteer_id))

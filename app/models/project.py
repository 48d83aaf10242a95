"""Project domain model: Pydantic schemas and CRUD functions."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from app.store import PROJECTS, DocumentStore

PROJECT_OPEN = "open"
PROJECT_CLOSED = "closed"
PROJECT_STATUSES = (PROJECT_OPEN, PROJECT_CLOSED)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    name: str
    description: str
    chapter: str
    status: Literal["open", "closed"] = PROJECT_OPEN
    image: str = ""


class Project(BaseModel):
    id: str
    name: str
    description: str
    chapter: str
    status: str
    image: str
    applicants: list[str]
    assigned_volunteers: list[str]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def _doc_to_project(doc: dict) -> Project:
    """Convert a stored document into a Project model."""
    return Project(
        id=doc["id"],
        name=doc.get("name", ""),
        description=doc.get("description", ""),
        chapter=doc.get("chapter", ""),
        status=doc.get("status", PROJECT_OPEN),
        image=doc.get("image") or "",
        applicants=list(doc.get("applicants") or []),
        assigned_volunteers=list(doc.get("assignedVolunteers") or []),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def create_project(store: DocumentStore, data: ProjectCreate) -> Project:
    """Insert a new project with empty relation lists and return it."""
    project_id = store.create(
        PROJECTS,
        {
            "name": data.name,
            "description": data.description,
            "chapter": data.chapter,
            "status": data.status,
            "image": data.image,
            "applicants": [],
            "assignedVolunteers": [],
        },
    )
    return get_project(store, project_id)


def get_project(store: DocumentStore, project_id: str) -> Optional[Project]:
    doc = store.get(PROJECTS, project_id)
    if doc is None:
        return None
    return _doc_to_project(doc)


def list_projects(store: DocumentStore, status: Optional[str] = None) -> list[Project]:
    """Return all projects, optionally filtered by status."""
    projects = [_doc_to_project(d) for d in store.list(PROJECTS)]
    if status is None:
        return projects
    return [p for p in projects if p.status == status]


def set_project_status(store: DocumentStore, project_id: str, status: str) -> Optional[Project]:
    """Open or close a project. Existing applications are left untouched."""
    if get_project(store, project_id) is None:
        return None
    store.update(PROJECTS, project_id, {"status": status})
    return get_project(store, project_id)

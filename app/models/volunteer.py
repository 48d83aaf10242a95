from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from app.store import VOLUNTEERS, DocumentStore


# ---------------------------------------------------------------------------
# Schema constants
# ---------------------------------------------------------------------------

CHAPTERS = (
    "Tagum",
    "Cebu",
    "Manila",
    "Davao",
    "Cagayan de Oro",
    "Iloilo",
    "Bacolod",
    "General Santos",
    "Zamboanga",
    "Butuan",
)

ROLE_ADMIN = "Admin"
ROLE_CHAPTER_HEAD = "Chapter Head"
ROLE_VOLUNTEER = "Volunteer"
ROLES = (ROLE_ADMIN, ROLE_CHAPTER_HEAD, ROLE_VOLUNTEER)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
VOLUNTEER_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class VolunteerCreate(BaseModel):
    name: str
    email: str
    chapter: str
    role: Literal["Admin", "Chapter Head", "Volunteer"] = ROLE_VOLUNTEER
    status: Literal["pending", "approved", "rejected"] = STATUS_PENDING


class Volunteer(BaseModel):
    id: str
    name: str
    email: str
    role: str
    chapter: str
    status: str
    applied_projects: list[str]
    assigned_projects: list[str]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------------------------------------------------------------------
# CRUD helpers
# ---------------------------------------------------------------------------

def _doc_to_volunteer(doc: dict) -> Volunteer:
    return Volunteer(
        id=doc["id"],
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        role=doc.get("role", ROLE_VOLUNTEER),
        chapter=doc.get("chapter", ""),
        status=doc.get("status", STATUS_PENDING),
        applied_projects=list(doc.get("appliedProjects") or []),
        assigned_projects=list(doc.get("assignedProjects") or []),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def create_volunteer(store: DocumentStore, uid: str, data: VolunteerCreate) -> Volunteer:
    """Write the profile document for identity ``uid`` and return it.

    Relation lists always start empty.
    """
    store.set(
        VOLUNTEERS,
        uid,
        {
            "name": data.name,
            "email": data.email,
            "role": data.role,
            "chapter": data.chapter,
            "status": data.status,
            "appliedProjects": [],
            "assignedProjects": [],
        },
        merge=False,
    )
    return get_volunteer(store, uid)


def get_volunteer(store: DocumentStore, volunteer_id: str) -> Optional[Volunteer]:
    """Look up a volunteer by id. Returns None if not found."""
    doc = store.get(VOLUNTEERS, volunteer_id)
    if doc is None:
        return None
    return _doc_to_volunteer(doc)


def list_volunteers(store: DocumentStore, status: Optional[str] = None) -> list[Volunteer]:
    """Return all volunteers, optionally filtered by status."""
    vols = [_doc_to_volunteer(d) for d in store.list(VOLUNTEERS)]
    if status is None:
        return vols
    return [v for v in vols if v.status == status]


def get_pending_volunteers(store: DocumentStore) -> list[Volunteer]:
    """Return all volunteers with status='pending'."""
    return list_volunteers(store, status=STATUS_PENDING)


def update_volunteer_name(store: DocumentStore, volunteer_id: str, name: str) -> Optional[Volunteer]:
    """Rename a volunteer. Email, role and status are not editable here."""
    if get_volunteer(store, volunteer_id) is None:
        return None
    store.update(VOLUNTEERS, volunteer_id, {"name": name})
    return get_volunteer(store, volunteer_id)

"""Seed helpers: the first admin profile and a sample project catalogue."""

from __future__ import annotations

from app.models.project import Project, ProjectCreate, create_project, list_projects
from app.models.volunteer import (
    ROLE_ADMIN,
    STATUS_APPROVED,
    Volunteer,
    VolunteerCreate,
    create_volunteer,
    get_volunteer,
)
from app.store import DocumentStore


def seed_admin(store: DocumentStore, uid: str, name: str, email: str, chapter: str) -> Volunteer:
    """Create an approved Admin profile for an existing identity account.

    Idempotent: returns the existing profile if ``uid`` already has one.
    """
    existing = get_volunteer(store, uid)
    if existing is not None:
        return existing
    return create_volunteer(
        store,
        uid,
        VolunteerCreate(
            name=name,
            email=email,
            chapter=chapter,
            role=ROLE_ADMIN,
            status=STATUS_APPROVED,
        ),
    )


# ---------------------------------------------------------------------------
# Project seed data
# ---------------------------------------------------------------------------

PROJECT_DATA = [
    {"name": "Tree Planting", "chapter": "Cebu",
     "description": "Reforestation drive along the Mananga watershed."},
    {"name": "Coastal Cleanup", "chapter": "Davao",
     "description": "Monthly beach and mangrove cleanup with local barangays."},
    {"name": "Reading Buddies", "chapter": "Manila",
     "description": "Weekend reading sessions for public elementary pupils."},
    {"name": "Feeding Program", "chapter": "Iloilo",
     "description": "Supplementary meals for day-care centres."},
    {"name": "Disaster Preparedness Seminar", "chapter": "Tagum",
     "description": "Basic first aid and evacuation drills for youth leaders."},
]


def seed_projects(store: DocumentStore) -> list[Project]:
    """Create the sample open projects.

    Idempotent: skips any project whose name already exists.
    Returns the full list of seeded projects (created or pre-existing).
    """
    by_name = {p.name: p for p in list_projects(store)}
    result: list[Project] = []
    for entry in PROJECT_DATA:
        existing = by_name.get(entry["name"])
        if existing is not None:
            result.append(existing)
            continue
        result.append(create_project(store, ProjectCreate(**entry)))
    return result

"""Read-side derivations over volunteer and project snapshots.

All functions are pure: they take lists already loaded from the store.
"""

from __future__ import annotations

from app.models.project import PROJECT_OPEN, Project
from app.models.volunteer import STATUS_APPROVED, STATUS_PENDING, Volunteer


def assigned_projects(volunteer: Volunteer, projects: list[Project]) -> list[Project]:
    """Projects the volunteer is confirmed on."""
    return [p for p in projects if p.id in volunteer.assigned_projects]


def pending_applications(volunteer: Volunteer, projects: list[Project]) -> list[Project]:
    """Projects applied to and not (yet) assigned."""
    return [
        p for p in projects
        if p.id in volunteer.applied_projects and p.id not in volunteer.assigned_projects
    ]


def is_applied(volunteer: Volunteer, project_id: str) -> bool:
    return project_id in volunteer.applied_projects


def open_projects(projects: list[Project]) -> list[Project]:
    return [p for p in projects if p.status == PROJECT_OPEN]


def project_applicants(project: Project, volunteers: list[Volunteer]) -> list[Volunteer]:
    """Volunteers awaiting a decision on ``project``, in application order."""
    by_id = {v.id: v for v in volunteers}
    return [by_id[vid] for vid in project.applicants if vid in by_id]


def project_assigned_volunteers(project: Project, volunteers: list[Volunteer]) -> list[Volunteer]:
    by_id = {v.id: v for v in volunteers}
    return [by_id[vid] for vid in project.assigned_volunteers if vid in by_id]


def dashboard_stats(volunteers: list[Volunteer], projects: list[Project]) -> dict:
    """Counts shown on the admin dashboard."""
    return {
        "pending_volunteers": sum(1 for v in volunteers if v.status == STATUS_PENDING),
        "approved_volunteers": sum(1 for v in volunteers if v.status == STATUS_APPROVED),
        "open_projects": len(open_projects(projects)),
        "total_applications": sum(len(p.applicants) for p in projects),
    }

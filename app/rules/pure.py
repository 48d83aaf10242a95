"""Pure workflow transitions — no store access.

Each ``plan_*`` function takes the current documents plus an action and
returns a ``Transition``: whether the action is allowed, a user-facing
reason, and the writes that carry it out. Callers apply the writes.
"""

from __future__ import annotations

from collections import namedtuple
from typing import Iterable, Optional

from app.models.project import PROJECT_OPEN, Project
from app.models.volunteer import STATUS_APPROVED, STATUS_REJECTED, Volunteer
from app.store import PROJECTS, VOLUNTEERS, Write


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

Transition = namedtuple("Transition", ["allowed", "reason", "writes", "code"])

# Refusal codes, mapped to HTTP statuses by the routes.
OK = "ok"
NOT_FOUND = "not_found"
PENDING_APPROVAL = "pending_approval"
PROJECT_CLOSED = "project_closed"
ALREADY_APPLIED = "already_applied"
ALREADY_ASSIGNED = "already_assigned"
NO_APPLICATION = "no_application"
INVALID_STATUS = "invalid_status"


def _refuse(reason: str, code: str) -> Transition:
    return Transition(False, reason, [], code)


def _with(items: list[str], value: str) -> list[str]:
    return items if value in items else [*items, value]


def _without(items: list[str], value: str) -> list[str]:
    return [i for i in items if i != value]


def _existing(items: list[str], known: dict) -> list[str]:
    return [i for i in dict.fromkeys(items) if i in known]


# ---------------------------------------------------------------------------
# Volunteer -> project
# ---------------------------------------------------------------------------

def plan_application(
    volunteer: Optional[Volunteer], project: Optional[Project]
) -> Transition:
    """Volunteer applies to a project: NONE -> APPLIED."""
    if volunteer is None or project is None:
        return _refuse("Project or volunteer not found", NOT_FOUND)

    if volunteer.status != STATUS_APPROVED:
        return _refuse(
            "Your account is pending approval. You cannot apply to projects yet.",
            PENDING_APPROVAL,
        )

    if project.status != PROJECT_OPEN:
        return _refuse("This project is closed to new applications", PROJECT_CLOSED)

    if project.id in volunteer.applied_projects or volunteer.id in project.applicants:
        return _refuse("You have already applied to this project", ALREADY_APPLIED)

    if project.id in volunteer.assigned_projects or volunteer.id in project.assigned_volunteers:
        return _refuse("You are already assigned to this project", ALREADY_ASSIGNED)

    writes = [
        Write(VOLUNTEERS, volunteer.id, {
            "appliedProjects": _with(volunteer.applied_projects, project.id),
        }),
        Write(PROJECTS, project.id, {
            "applicants": _with(project.applicants, volunteer.id),
        }),
    ]
    return Transition(True, "Application submitted successfully!", writes, OK)


# ---------------------------------------------------------------------------
# Admin decisions on an application
# ---------------------------------------------------------------------------

def _check_pending(
    project: Optional[Project], volunteer: Optional[Volunteer]
) -> Optional[Transition]:
    if project is None or volunteer is None:
        return _refuse("Project or volunteer not found", NOT_FOUND)
    if volunteer.id not in project.applicants:
        return _refuse(
            f"{volunteer.name} has no pending application for {project.name}",
            NO_APPLICATION,
        )
    return None


def plan_approval(
    project: Optional[Project], volunteer: Optional[Volunteer]
) -> Transition:
    """APPLIED -> ASSIGNED.

    The project id also leaves the volunteer's applied list, keeping
    applied and assigned disjoint on both documents.
    """
    refused = _check_pending(project, volunteer)
    if refused is not None:
        return refused

    writes = [
        Write(PROJECTS, project.id, {
            "applicants": _without(project.applicants, volunteer.id),
            "assignedVolunteers": _with(project.assigned_volunteers, volunteer.id),
        }),
        Write(VOLUNTEERS, volunteer.id, {
            "appliedProjects": _without(volunteer.applied_projects, project.id),
            "assignedProjects": _with(volunteer.assigned_projects, project.id),
        }),
    ]
    return Transition(True, "Application approved! Volunteer assigned to project.", writes, OK)


def plan_rejection(
    project: Optional[Project], volunteer: Optional[Volunteer]
) -> Transition:
    """APPLIED -> NONE."""
    refused = _check_pending(project, volunteer)
    if refused is not None:
        return refused

    writes = [
        Write(PROJECTS, project.id, {
            "applicants": _without(project.applicants, volunteer.id),
        }),
        Write(VOLUNTEERS, volunteer.id, {
            "appliedProjects": _without(volunteer.applied_projects, project.id),
        }),
    ]
    return Transition(True, "Application rejected", writes, OK)


# ---------------------------------------------------------------------------
# Admin decision on a volunteer account
# ---------------------------------------------------------------------------

def plan_volunteer_status(volunteer: Optional[Volunteer], status: str) -> Transition:
    """Set an account to approved or rejected. Relation lists are untouched."""
    if volunteer is None:
        return _refuse("Volunteer not found", NOT_FOUND)
    if status not in (STATUS_APPROVED, STATUS_REJECTED):
        return _refuse(f"Unsupported volunteer status: {status}", INVALID_STATUS)
    writes = [Write(VOLUNTEERS, volunteer.id, {"status": status})]
    return Transition(True, f"Volunteer {status} successfully!", writes, OK)


# ---------------------------------------------------------------------------
# Consistency repair
# ---------------------------------------------------------------------------

def plan_reconcile(
    volunteers: Iterable[Volunteer], projects: Iterable[Project]
) -> list[Write]:
    """Return the writes that restore the cross-document invariants.

    Rules, applied per (volunteer, project) pair:
    - ids pointing at documents that do not exist are dropped;
    - if either side records an assignment, both sides record it and
      neither side records an application;
    - otherwise, if either side records an application, both do.

    Running the result through the store and planning again yields no writes.
    """
    vols = {v.id: v for v in volunteers}
    projs = {p.id: p for p in projects}

    v_applied = {vid: _existing(v.applied_projects, projs) for vid, v in vols.items()}
    v_assigned = {vid: _existing(v.assigned_projects, projs) for vid, v in vols.items()}
    p_applicants = {pid: _existing(p.applicants, vols) for pid, p in projs.items()}
    p_assigned = {pid: _existing(p.assigned_volunteers, vols) for pid, p in projs.items()}

    for pid in projs:
        for vid in vols:
            assigned = pid in v_assigned[vid] or vid in p_assigned[pid]
            applied = pid in v_applied[vid] or vid in p_applicants[pid]
            if assigned:
                v_assigned[vid] = _with(v_assigned[vid], pid)
                p_assigned[pid] = _with(p_assigned[pid], vid)
                v_applied[vid] = _without(v_applied[vid], pid)
                p_applicants[pid] = _without(p_applicants[pid], vid)
            elif applied:
                v_applied[vid] = _with(v_applied[vid], pid)
                p_applicants[pid] = _with(p_applicants[pid], vid)

    writes: list[Write] = []
    for vid, v in vols.items():
        changes = {}
        if v_applied[vid] != v.applied_projects:
            changes["appliedProjects"] = v_applied[vid]
        if v_assigned[vid] != v.assigned_projects:
            changes["assignedProjects"] = v_assigned[vid]
        if changes:
            writes.append(Write(VOLUNTEERS, vid, changes))
    for pid, p in projs.items():
        changes = {}
        if p_applicants[pid] != p.applicants:
            changes["applicants"] = p_applicants[pid]
        if p_assigned[pid] != p.assigned_volunteers:
            changes["assignedVolunteers"] = p_assigned[pid]
        if changes:
            writes.append(Write(PROJECTS, pid, changes))
    return writes

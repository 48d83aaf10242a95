"""Role-based permission check: ``can(role, action)``."""

from __future__ import annotations

from enum import Enum

from app.models.volunteer import ROLE_ADMIN, ROLE_CHAPTER_HEAD, ROLE_VOLUNTEER


class Action(Enum):
    APPLY = "apply"
    VIEW_OWN_DASHBOARD = "view_own_dashboard"
    UPDATE_OWN_PROFILE = "update_own_profile"
    VIEW_ADMIN_DASHBOARD = "view_admin_dashboard"
    REVIEW_VOLUNTEERS = "review_volunteers"
    REVIEW_APPLICATIONS = "review_applications"
    MANAGE_PROJECTS = "manage_projects"
    RECONCILE = "reconcile"


_VOLUNTEER_ACTIONS = frozenset({
    Action.APPLY,
    Action.VIEW_OWN_DASHBOARD,
    Action.UPDATE_OWN_PROFILE,
})

_CHAPTER_HEAD_ACTIONS = _VOLUNTEER_ACTIONS | {
    Action.VIEW_ADMIN_DASHBOARD,
    Action.REVIEW_VOLUNTEERS,
    Action.REVIEW_APPLICATIONS,
    Action.MANAGE_PROJECTS,
}

PERMISSIONS: dict[str, frozenset] = {
    ROLE_ADMIN: frozenset(Action),
    ROLE_CHAPTER_HEAD: frozenset(_CHAPTER_HEAD_ACTIONS),
    ROLE_VOLUNTEER: _VOLUNTEER_ACTIONS,
}


def can(role: str, action: Action) -> bool:
    """Return True if ``role`` may perform ``action``. Unknown roles may do nothing."""
    return action in PERMISSIONS.get(role, frozenset())

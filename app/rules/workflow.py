"""Workflow orchestrator.

Loads the documents an operation needs, asks ``app.rules.pure`` for the
transition, and applies the planned writes. Reads and writes of one
operation share a single store transaction, so the paired volunteer and
project updates land together or not at all.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from app.auth import provider
from app.media.uploader import upload_image, validate_image
from app.models.project import Project, ProjectCreate, create_project, get_project, list_projects
from app.models.volunteer import (
    STATUS_APPROVED,
    STATUS_REJECTED,
    Volunteer,
    VolunteerCreate,
    create_volunteer,
    get_volunteer,
    list_volunteers,
)
from app.rules.pure import (
    OK,
    Transition,
    plan_application,
    plan_approval,
    plan_reconcile,
    plan_rejection,
    plan_volunteer_status,
)
from app.rules.validator import validate_project, validate_registration
from app.store import DocumentStore

logger = logging.getLogger(__name__)

IMAGE_UPLOAD_WARNING = "Image upload failed. Creating project without image."


class ValidationFailed(Exception):
    """Form errors found before any write. ``errors`` maps field -> message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


@dataclass
class WorkflowOutcome:
    success: bool
    message: str
    code: str
    writes: int = 0


def _commit(store: DocumentStore, transition: Transition, action: str, **ids) -> WorkflowOutcome:
    if not transition.allowed:
        logger.info("%s refused (%s) for %s", action, transition.code, ids)
        return WorkflowOutcome(False, transition.reason, transition.code)
    count = store.apply(transition.writes)
    logger.info("%s completed for %s (%d writes)", action, ids, count)
    return WorkflowOutcome(True, transition.reason, OK, count)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def register_volunteer(
    store: DocumentStore,
    name: str,
    email: str,
    password: str,
    chapter: str,
    confirm_password: Optional[str] = None,
) -> tuple[Volunteer, provider.IdentityAccount]:
    """Create the identity account, then the pending profile document.

    Raises ValidationFailed or provider.IdentityError before anything is
    written. If the profile write fails after the account exists, the
    account is left orphaned and logged.
    """
    errors = validate_registration(name, email, password, chapter, confirm_password)
    if errors:
        raise ValidationFailed(errors)

    account = provider.create_account(email, password)
    try:
        volunteer = create_volunteer(
            store,
            account.uid,
            VolunteerCreate(name=name.strip(), email=account.email, chapter=chapter),
        )
    except sqlite3.Error:
        logger.exception(
            "Profile write failed for new account %s; identity is orphaned", account.uid
        )
        raise

    logger.info("Registered volunteer %s (%s chapter)", account.uid, chapter)
    return volunteer, account


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

def apply_to_project(store: DocumentStore, volunteer_id: str, project_id: str) -> WorkflowOutcome:
    with store.transaction():
        transition = plan_application(
            get_volunteer(store, volunteer_id), get_project(store, project_id)
        )
        return _commit(store, transition, "apply", volunteer=volunteer_id, project=project_id)


def approve_application(store: DocumentStore, project_id: str, volunteer_id: str) -> WorkflowOutcome:
    with store.transaction():
        transition = plan_approval(
            get_project(store, project_id), get_volunteer(store, volunteer_id)
        )
        return _commit(store, transition, "approve application", volunteer=volunteer_id, project=project_id)


def reject_application(store: DocumentStore, project_id: str, volunteer_id: str) -> WorkflowOutcome:
    with store.transaction():
        transition = plan_rejection(
            get_project(store, project_id), get_volunteer(store, volunteer_id)
        )
        return _commit(store, transition, "reject application", volunteer=volunteer_id, project=project_id)


# ---------------------------------------------------------------------------
# Volunteer accounts
# ---------------------------------------------------------------------------

def set_volunteer_status(store: DocumentStore, volunteer_id: str, approve: bool) -> WorkflowOutcome:
    """Approve or reject a volunteer account. Existing assignments are kept."""
    status = STATUS_APPROVED if approve else STATUS_REJECTED
    with store.transaction():
        volunteer = get_volunteer(store, volunteer_id)
        outcome = _commit(
            store, plan_volunteer_status(volunteer, status), f"volunteer {status}", volunteer=volunteer_id
        )
    if outcome.success and not approve and volunteer.assigned_projects:
        logger.warning(
            "Rejected volunteer %s still holds %d project assignment(s): %s",
            volunteer_id,
            len(volunteer.assigned_projects),
            ", ".join(volunteer.assigned_projects),
        )
    return outcome


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def create_project_with_image(
    store: DocumentStore,
    name: str,
    description: str,
    chapter: str,
    status: str = "open",
    image: Optional[tuple[str, bytes, str]] = None,
) -> tuple[Project, list[str]]:
    """Create a project, uploading ``image`` (filename, content, content_type) first.

    An image of the wrong type or size raises ``ImageRejected`` before any
    network call. A failed upload only adds a warning.
    """
    errors = validate_project(name, description, chapter, status)
    if errors:
        raise ValidationFailed(errors)

    warnings: list[str] = []
    image_url = ""
    if image is not None:
        filename, content, content_type = image
        validate_image(content_type, len(content))
        url = upload_image(filename, content, content_type)
        if url is None:
            warnings.append(IMAGE_UPLOAD_WARNING)
        else:
            image_url = url

    project = create_project(
        store,
        ProjectCreate(
            name=name.strip(),
            description=description.strip(),
            chapter=chapter,
            status=status,
            image=image_url,
        ),
    )
    logger.info("Created project %s (%s)", project.id, project.name)
    return project, warnings


# ---------------------------------------------------------------------------
# Consistency repair
# ---------------------------------------------------------------------------

def reconcile(store: DocumentStore) -> int:
    """Repair relation lists left inconsistent by partial or external writes.

    Returns the number of documents rewritten.
    """
    with store.transaction():
        writes = plan_reconcile(list_volunteers(store), list_projects(store))
        if writes:
            store.apply(writes)
    if writes:
        logger.warning("Reconciliation repaired %d document(s)", len(writes))
    else:
        logger.debug("Reconciliation found nothing to repair")
    return len(writes)

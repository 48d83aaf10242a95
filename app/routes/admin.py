"""Admin dashboard routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.session import UserContext
from app.models.project import list_projects
from app.models.volunteer import list_volunteers
from app.routes.deps import get_store, require
from app.rules.permissions import Action
from app.rules.queries import dashboard_stats
from app.rules.workflow import reconcile
from app.store import DocumentStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats")
def get_stats(
    user: UserContext = Depends(require(Action.VIEW_ADMIN_DASHBOARD)),
    store: DocumentStore = Depends(get_store),
):
    return dashboard_stats(list_volunteers(store), list_projects(store))


@router.post("/reconcile")
def post_reconcile(
    user: UserContext = Depends(require(Action.RECONCILE)),
    store: DocumentStore = Depends(get_store),
):
    """Repair relation lists that disagree between volunteers and projects."""
    return {"repaired": reconcile(store)}

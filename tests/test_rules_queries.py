from app.models.project import Project
from app.models.volunteer import Volunteer
from app.rules.queries import (
    assigned_projects,
    dashboard_stats,
    is_applied,
    open_projects,
    pending_applications,
    project_applicants,
    project_assigned_volunteers,
)


def _vol(vid, status="approved", applied=(), assigned=()):
    return Volunteer(
        id=vid, name=vid, email=f"{vid}@example.org", role="Volunteer", chapter="Cebu",
        status=status, applied_projects=list(applied), assigned_projects=list(assigned),
    )


def _proj(pid, status="open", applicants=(), assigned=()):
    return Project(
        id=pid, name=pid, description="d", chapter="Cebu", status=status, image="",
        applicants=list(applicants), assigned_volunteers=list(assigned),
    )


PROJECTS = [
    _proj("p1", applicants=["v1"]),
    _proj("p2", assigned=["v1"]),
    _proj("p3", status="closed", applicants=["v2", "v3"]),
]


def test_assigned_projects():
    vol = _vol("v1", applied=["p1"], assigned=["p2"])
    assert [p.id for p in assigned_projects(vol, PROJECTS)] == ["p2"]


def test_pending_applications_excludes_assigned():
    # legacy documents may list an assigned project as applied too
    vol = _vol("v1", applied=["p1", "p2"], assigned=["p2"])
    assert [p.id for p in pending_applications(vol, PROJECTS)] == ["p1"]


def test_is_applied():
    vol = _vol("v1", applied=["p1"])
    assert is_applied(vol, "p1")
    assert not is_applied(vol, "p2")


def test_open_projects():
    assert [p.id for p in open_projects(PROJECTS)] == ["p1", "p2"]


def test_project_applicants_in_application_order_skips_missing():
    vols = [_vol("v3"), _vol("v2")]
    assert [v.id for v in project_applicants(PROJECTS[2], vols)] == ["v2", "v3"]
    assert project_applicants(PROJECTS[0], vols) == []


def test_project_assigned_volunteers():
    vols = [_vol("v1")]
    assert [v.id for v in project_assigned_volunteers(PROJECTS[1], vols)] == ["v1"]


def test_dashboard_stats():
    vols = [_vol("v1"), _vol("v2", status="pending"), _vol("v3", status="pending"), _vol("v4", status="rejected")]
    assert dashboard_stats(vols, PROJECTS) == {
        "pending_volunteers": 2,
        "approved_volunteers": 1,
        "open_projects": 2,
        "total_applications": 3,
    }

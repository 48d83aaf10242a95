from app.seed import PROJECT_DATA, seed_admin, seed_projects


def test_seed_projects_creates_open_catalogue(store):
    projects = seed_projects(store)

    assert len(projects) == len(PROJECT_DATA)
    assert all(p.status == "open" for p in projects)
    assert all(p.applicants == [] and p.assigned_volunteers == [] for p in projects)


def test_seed_projects_is_idempotent(store):
    first = seed_projects(store)
    second = seed_projects(store)

    assert [p.id for p in first] == [p.id for p in second]


def test_seed_admin(store):
    admin = seed_admin(store, "admin-uid", "Admin", "admin@example.org", "Manila")

    assert admin.role == "Admin"
    assert admin.status == "approved"
    assert seed_admin(store, "admin-uid", "Other", "x@example.org", "Cebu").name == "Admin"

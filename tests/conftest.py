import pytest

from fastapi.testclient import TestClient

from app.auth.session import create_session
from app.db import get_db_connection, create_tables
from app.main import app
from app.models.volunteer import VolunteerCreate, create_volunteer
from app.store import DocumentStore


@pytest.fixture
def db():
    """Yield an in-memory SQLite connection with all tables created."""
    conn = get_db_connection(":memory:")
    create_tables(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def client(store):
    """TestClient bound to the in-memory store (startup hooks are not run)."""
    app.state.store = store
    return TestClient(app)


@pytest.fixture
def login_as(store):
    """Create a profile plus session and return (volunteer, auth headers)."""

    def _login(uid, name="Test Vol", role="Volunteer", status="approved", chapter="Cebu"):
        vol = create_volunteer(
            store,
            uid,
            VolunteerCreate(
                name=name,
                email=f"{uid}@example.org",
                chapter=chapter,
                role=role,
                status=status,
            ),
        )
        token = create_session(store, uid, f"id-token-{uid}")
        return vol, {"Authorization": f"Bearer {token}"}

    return _login

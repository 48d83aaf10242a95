import os

from fastapi.testclient import TestClient

from app.main import app


def test_healthz_with_custom_db_path(tmp_path, monkeypatch):
    """FastAPI starts with a custom DB_PATH and creates the database there."""
    db_path = tmp_path / "data" / "ysp-vol.db"
    monkeypatch.setenv("DB_PATH", str(db_path))
    monkeypatch.setenv("RECONCILE_INTERVAL_MINUTES", "0")

    # Use context manager to ensure startup/shutdown events are triggered
    with TestClient(app) as client:
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

        assert os.path.exists(db_path), "Database file not created at custom path"

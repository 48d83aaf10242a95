import logging
import os
import sqlite3
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth.provider import IdentityError
from app.db import get_db_connection, create_tables
from app.logging_config import configure_logging
from app.media.uploader import ImageRejected
from app.routes.admin import router as admin_router
from app.routes.auth import router as auth_router
from app.routes.projects import router as projects_router
from app.routes.volunteers import router as volunteers_router
from app.rules.workflow import ValidationFailed
from app.scheduler import start_scheduler, shutdown_scheduler
from app.store import DocumentStore

logger = logging.getLogger(__name__)

app = FastAPI(title="ysp-vol", description="Volunteer Project Management")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router)
app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(volunteers_router)


@app.on_event("startup")
def startup():
    configure_logging()
    db_path = os.getenv("DB_PATH", "ysp-vol.db")
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)
    conn = get_db_connection(db_path)
    create_tables(conn)
    app.state.store = DocumentStore(conn)
    app.state.scheduler = start_scheduler(app.state.store)
    logger.info("Started with database %s", db_path)


@app.on_event("shutdown")
def shutdown():
    shutdown_scheduler(app.state.scheduler)
    app.state.store.conn.close()


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.exception_handler(ValidationFailed)
def validation_failed(request: Request, exc: ValidationFailed):
    return JSONResponse(
        status_code=422,
        content={"detail": "Please correct the highlighted fields", "errors": exc.errors},
    )


@app.exception_handler(IdentityError)
def identity_error(request: Request, exc: IdentityError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(ImageRejected)
def image_rejected(request: Request, exc: ImageRejected):
    status_code = 413 if exc.reason == "size" else 415
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(sqlite3.Error)
def store_error(request: Request, exc: sqlite3.Error):
    logger.error("Store write failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Something went wrong. Please try again."},
    )


@app.get("/healthz")
def healthz():
    return {"status": "ok"}

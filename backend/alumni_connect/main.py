"""
FastAPI application entrypoint.
Run with: uvicorn alumni_connect.main:app --reload --port 8000 (from backend/)

Routes are mounted at root (no /api/v1 prefix).
  - Auth: POST /auth/register, POST /auth/login, GET /auth/me
  - Universities: GET /universities, /superadmin/universities (superadmin console)
  - Admin: GET /admin/users, POST /admin/users/{id}/deactivate|activate
  - Connections: /connections, /connections/suggestions, /connections/request, ...
  - Mentors: /mentors, /mentors/me, /mentors/{id}/request, ...
  - Notifications: /notifications, /notifications/unread-count, ...

Service errors (alumni_connect.errors.DomainError) render as {"detail": ..., "code": ...}.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from alumni_connect import metrics
from alumni_connect.config import settings, DEFAULT_SECRET_KEY
from alumni_connect.errors import DomainError, StorageFailure, Unauthorized
from alumni_connect.api.auth import router as auth_router
from alumni_connect.api.admin import router as admin_router
from alumni_connect.api.connections import router as connections_router
from alumni_connect.api.mentors import router as mentors_router
from alumni_connect.api.notifications import router as notifications_router
from alumni_connect.api.universities import router as universities_router, superadmin_router
from alumni_connect.api.users import router as users_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Alumni Connect API",
    description="Multi-tenant alumni network: connections, mentorship, notifications.",
    version="0.1.0",
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(universities_router)
app.include_router(superadmin_router)
app.include_router(admin_router)
app.include_router(users_router)
app.include_router(connections_router)
app.include_router(mentors_router)
app.include_router(notifications_router)


@app.exception_handler(DomainError)
def domain_error_handler(request: Request, exc: DomainError):
    detail = exc.message
    if isinstance(exc, StorageFailure) and settings.debug and exc.__cause__ is not None:
        detail = f"{exc.message}: {type(exc.__cause__).__name__}: {exc.__cause__}"
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail, "code": exc.code},
        headers=headers,
    )


@app.on_event("startup")
def startup():
    """Configure logging, refuse the default SECRET_KEY in production, create SQLite tables."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if settings.is_production and (settings.secret_key or "").strip() == DEFAULT_SECRET_KEY:
        logger.critical("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
        raise RuntimeError("SECRET_KEY must be set in production. Set SECRET_KEY in env or .env.")
    logger.info("Ranking strategy: %s", settings.ranking_strategy)
    from alumni_connect.database import init_db
    init_db()


@app.get("/health")
def health():
    """Health check (JSON) with process-local counters."""
    return {"status": "ok", "message": "Alumni Connect API", "metrics": metrics.snapshot()}

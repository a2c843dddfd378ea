"""
FastAPI application entrypoint.
Run with: uvicorn aev_scheduler.main:app --reload --port 8000 (from backend/)

Routes:
  - Auth:      POST /api/register, POST /api/register/verify-code,
               POST /api/auth/login, POST /api/auth/logout, GET /api/auth/session
  - Dashboard: GET /api/dashboard
  - Projects:  GET/POST /api/projects, GET/PATCH/DELETE /api/projects/{id}, POST /api/projects/{id}/members
  - Users:     GET/POST /api/users, POST /api/users/bulk, DELETE /api/users/{id}
  - Tasks:     GET/POST /api/tasks, PATCH /api/tasks/{id}

DATABASE_URL and SECRET_KEY must be set (env or backend/.env); the app refuses to start otherwise.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aev_scheduler.api.auth import router as auth_router
from aev_scheduler.api.dashboard import router as dashboard_router
from aev_scheduler.api.projects import router as projects_router
from aev_scheduler.api.tasks import router as tasks_router
from aev_scheduler.api.users import router as users_router
from aev_scheduler.config import Settings, get_settings
from aev_scheduler.database import Database
from aev_scheduler.errors import register_error_handlers


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="AEV Scheduler API",
        description="Projects, tasks and users for staff and students.",
        version="0.1.0",
    )
    app.state.settings = settings

    _origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins if _origins else ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(projects_router)
    app.include_router(users_router)
    app.include_router(tasks_router)

    @app.on_event("startup")
    def startup():
        """Open the database handle; create tables on SQLite (PostgreSQL uses Alembic)."""
        logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO,
                            format="%(levelname)s %(name)s: %(message)s")
        _log = logging.getLogger("aev_scheduler.main")
        db = Database(settings.database_url)
        if db.is_sqlite:
            db.create_schema()
        app.state.db = db
        _log.info("Database ready (%s)", db.engine.url.render_as_string(hide_password=True))
        _log.warning(
            "Staff self-registration is open: POST /api/register accepts role=staff from anyone. "
            "The login page security code is a UI gate only."
        )

    @app.on_event("shutdown")
    def shutdown():
        db = getattr(app.state, "db", None)
        if db is not None:
            db.dispose()

    @app.get("/health")
    def health():
        """Health check (JSON)."""
        return {"status": "ok", "message": "AEV Scheduler API"}

    return app


app = create_app()
